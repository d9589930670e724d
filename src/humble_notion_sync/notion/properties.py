# Encode/decode Notion property values, one pair per field type.
import datetime
from typing import Any, Dict, List, Optional


# ---- decode (page["properties"] -> python) ----

def title_plain(props: Dict[str, Any], name: str) -> str:
    tt = (props.get(name) or {}).get("title") or []
    if tt and isinstance(tt, list):
        first = tt[0] or {}
        return (first.get("plain_text") or "").strip()
    return ""


def rt_plain(props: Dict[str, Any], name: str) -> str:
    rt = (props.get(name) or {}).get("rich_text") or []
    if rt and isinstance(rt, list):
        first = rt[0] or {}
        return (first.get("plain_text") or "").strip()
    return ""


def number_value(props: Dict[str, Any], name: str) -> Optional[float]:
    n = (props.get(name) or {}).get("number")
    return float(n) if n is not None else None


def date_start(props: Dict[str, Any], name: str) -> Optional[datetime.date]:
    d = (props.get(name) or {}).get("date") or {}
    start = d.get("start")
    if not start:
        return None
    # "2024-01-15" or "2024-01-15T10:00:00.000+00:00"
    return datetime.date.fromisoformat(start[:10])


def select_name(props: Dict[str, Any], name: str) -> str:
    s = (props.get(name) or {}).get("select") or {}
    return s.get("name") or ""


def multi_select_names(props: Dict[str, Any], name: str) -> List[str]:
    ms = (props.get(name) or {}).get("multi_select") or []
    return [t.get("name", "") for t in ms if t.get("name")]


def relation_ids(props: Dict[str, Any], name: str) -> List[str]:
    rel = (props.get(name) or {}).get("relation") or []
    return [r["id"] for r in rel if r.get("id")]


def property_type(props: Dict[str, Any], name: str) -> Optional[str]:
    return (props.get(name) or {}).get("type")


# ---- encode (python -> property value) ----

def title_prop(text: str) -> Dict[str, Any]:
    return {"title": [{"type": "text", "text": {"content": text or "Untitled"}}]}


def rich_text_prop(text: Optional[str]) -> Dict[str, Any]:
    # Empty list clears the field
    return {"rich_text": ([{"type": "text", "text": {"content": text}}] if text else [])}


def number_prop(value: Optional[float]) -> Dict[str, Any]:
    return {"number": None if value is None else float(value)}


def date_prop(value: Optional[datetime.date]) -> Dict[str, Any]:
    return {"date": {"start": value.isoformat()} if value else None}


def select_prop(name: Optional[str]) -> Dict[str, Any]:
    return {"select": {"name": name} if name else None}


def multi_select_prop(names: List[str]) -> Dict[str, Any]:
    return {"multi_select": [{"name": n} for n in names]}


def relation_prop(page_ids: List[str]) -> Dict[str, Any]:
    return {"relation": [{"id": pid} for pid in page_ids]}


def text_value_for_type(prop_type: Optional[str], text: str) -> Dict[str, Any]:
    """Encode a plain label into whatever type the target property declares."""
    if prop_type == "select":
        return select_prop(text)
    if prop_type == "multi_select":
        return multi_select_prop([text])
    if prop_type == "rich_text":
        return rich_text_prop(text)
    if prop_type == "title":
        return title_prop(text)
    raise ValueError(f"Unsupported property type {prop_type!r}")
