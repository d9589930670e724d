"""
Record shapes mirrored from the two Notion databases, plus the raw rows the
storefront scraper produces before they are parsed.
"""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from humble_notion_sync.notion import properties as p

# Notion column names
BUNDLE_SCHEMA: Dict[str, str] = {
    "name"         : "Name",           # title
    "bundle_name"  : "Bundle Name",    # rich_text
    "purchase_date": "Purchase Date",  # date
    "price"        : "Price",          # number
    "bundle_types" : "Bundle Type",    # multi_select
}

BOOK_SCHEMA: Dict[str, str] = {
    "name"     : "Name",       # title ("<title> by <author>")
    "title"    : "Title",      # rich_text
    "author"   : "Author",     # rich_text
    "publisher": "Publisher",  # rich_text
    "bundles"  : "Bundles",    # relation -> Bundles DB
}


class Bundle(BaseModel):
    """One purchase event."""
    id: str
    name: str = "Untitled"
    bundle_name: str = ""
    purchase_date: Optional[datetime.date] = None
    price: Optional[float] = None  # as typed in Notion, negatives included
    bundle_types: List[str] = Field(default_factory=list)
    created_time: Optional[str] = None
    last_edited_time: Optional[str] = None

    @classmethod
    def from_page(cls, page: Dict[str, Any]) -> "Bundle":
        props = page.get("properties", {})
        s = BUNDLE_SCHEMA
        return cls(
            id=page["id"],
            name=p.title_plain(props, s["name"]) or "Untitled",
            bundle_name=p.rt_plain(props, s["bundle_name"]),
            purchase_date=p.date_start(props, s["purchase_date"]),
            price=p.number_value(props, s["price"]),
            bundle_types=p.multi_select_names(props, s["bundle_types"]),
            created_time=page.get("created_time"),
            last_edited_time=page.get("last_edited_time"),
        )


class Book(BaseModel):
    """One catalog item; may belong to several bundles."""
    id: str
    name: str = "Untitled"
    title: str = ""
    author: Optional[str] = None
    publisher: Optional[str] = None
    bundle_ids: List[str] = Field(default_factory=list)

    @classmethod
    def from_page(cls, page: Dict[str, Any]) -> "Book":
        props = page.get("properties", {})
        s = BOOK_SCHEMA
        return cls(
            id=page["id"],
            name=p.title_plain(props, s["name"]) or "Untitled",
            title=p.rt_plain(props, s["title"]),
            author=p.rt_plain(props, s["author"]) or None,
            publisher=p.rt_plain(props, s["publisher"]) or None,
            bundle_ids=p.relation_ids(props, s["bundles"]),
        )


class RawPurchase(BaseModel):
    """A purchase-history row exactly as the storefront rendered it."""
    name: str
    date_text: str
    price_text: str = "$0.00"

    @field_validator("name", "date_text", "price_text", mode="before")
    @classmethod
    def _collapse_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return " ".join(v.split())
        return v


class RawBook(BaseModel):
    """A library tile: title, author line and the enclosing bundle's name."""
    title: str
    author: str = ""
    bundle_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.title} by {self.author}" if self.author else self.title


class ParsedPurchase(BaseModel):
    name: str
    purchase_date: Optional[datetime.date] = None
    price: float = 0.0


def bundle_properties(purchase: ParsedPurchase) -> Dict[str, Any]:
    """Translate a parsed purchase into Bundles DB page properties."""
    s = BUNDLE_SCHEMA
    return {
        s["name"]         : p.title_prop(purchase.name),
        s["bundle_name"]  : p.rich_text_prop(purchase.name),
        s["purchase_date"]: p.date_prop(purchase.purchase_date),
        s["price"]        : p.number_prop(purchase.price),
    }


def book_properties(book: RawBook, bundle_ids: Optional[List[str]] = None, publisher: str = "") -> Dict[str, Any]:
    """Translate a scraped book into Books DB page properties."""
    s = BOOK_SCHEMA
    props: Dict[str, Any] = {
        s["name"]  : p.title_prop(book.display_name),
        s["title"] : p.rich_text_prop(book.title),
        s["author"]: p.rich_text_prop(book.author),
    }
    if publisher:
        props[s["publisher"]] = p.rich_text_prop(publisher)
    if bundle_ids:
        props[s["bundles"]] = p.relation_prop(bundle_ids)
    return props


def bundles_database_properties() -> Dict[str, Any]:
    """Column definitions for a new Bundles database."""
    s = BUNDLE_SCHEMA
    return {
        s["name"]         : {"title": {}},
        s["bundle_name"]  : {"rich_text": {}},
        s["purchase_date"]: {"date": {}},
        s["price"]        : {"number": {"format": "dollar"}},
        s["bundle_types"] : {"multi_select": {"options": []}},
    }


def books_database_properties(bundles_database_id: str) -> Dict[str, Any]:
    """Column definitions for a new Books database, related both ways to Bundles."""
    s = BOOK_SCHEMA
    return {
        s["name"]     : {"title": {}},
        s["title"]    : {"rich_text": {}},
        s["author"]   : {"rich_text": {}},
        s["publisher"]: {"rich_text": {}},
        s["bundles"]  : {
            "relation": {
                "database_id": bundles_database_id,
                "type": "dual_property",
                "dual_property": {"synced_property_name": "Books"},
            }
        },
    }
