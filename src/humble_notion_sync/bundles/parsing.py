"""
Text parsing for purchase data.

The storefront renders dates like ``Dec 9, 2025`` and prices like ``$18.00``;
the flat import file uses the same forms on one line per purchase:

    Humble Book Bundle: Linux by O'Reilly Dec 9, 2025 $18.00
    Humble Bundle: Some Game Jan 2, 2019 --
    Humble Choice February Feb 1, 2021 Gift
"""

from __future__ import annotations

import datetime
import re
from pathlib import Path
from typing import List, Optional, Tuple

from humble_notion_sync.models import ParsedPurchase, RawPurchase

LINE_RE = re.compile(
    r"^(?P<name>.+?)\s+"
    r"(?P<date>[A-Z][a-z]{2,8}\.?\s+\d{1,2},\s+\d{4})\s+"
    r"(?P<price>\$[\d,]+(?:\.\d+)?|--|Gift)$"
)
PRICE_RE = re.compile(r"\d[\d,]*(?:\.\d+)?|\.\d+")
NO_CHARGE = {"--", "gift", ""}
DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%b. %d, %Y", "%Y-%m-%d")


def parse_purchase_date(text: str) -> Optional[datetime.date]:
    """Parse a storefront date; None when it is not a recognizable date."""
    t = " ".join((text or "").split())
    # "Sept" is not a strptime abbreviation
    t = re.sub(r"^Sept\b", "Sep", t)
    for fmt in DATE_FORMATS:
        try:
            return datetime.datetime.strptime(t, fmt).date()
        except ValueError:
            continue
    return None


def parse_price(text: str) -> float:
    """``$18.00`` -> 18.0; ``--``, ``Gift`` and unparseable text -> 0.0."""
    t = (text or "").strip()
    if t.lower() in NO_CHARGE:
        return 0.0
    m = PRICE_RE.search(t)
    if not m:
        return 0.0
    return float(m.group(0).replace(",", ""))


def parse_line(line: str) -> Optional[ParsedPurchase]:
    """Parse one import-file line; None when it does not fit the grammar."""
    m = LINE_RE.match(line.strip())
    if not m:
        return None
    return ParsedPurchase(
        name=m.group("name").strip(),
        purchase_date=parse_purchase_date(m.group("date")),
        price=parse_price(m.group("price")),
    )


def parse_raw_purchase(raw: RawPurchase) -> ParsedPurchase:
    return ParsedPurchase(
        name=raw.name,
        purchase_date=parse_purchase_date(raw.date_text),
        price=parse_price(raw.price_text),
    )


def read_import_file(path: Path) -> Tuple[List[ParsedPurchase], List[str]]:
    """Return (parsed purchases, unparseable lines); blank lines are ignored."""
    parsed: List[ParsedPurchase] = []
    rejected: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line.strip():
            continue
        purchase = parse_line(line)
        if purchase is None:
            rejected.append(line)
        else:
            parsed.append(purchase)
    return parsed, rejected


def dedupe_purchases(purchases: List[ParsedPurchase]) -> List[ParsedPurchase]:
    """Drop repeats of the same (name, date), keeping the first occurrence."""
    seen = set()
    out: List[ParsedPurchase] = []
    for p in purchases:
        key = (p.name, p.purchase_date)
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out
