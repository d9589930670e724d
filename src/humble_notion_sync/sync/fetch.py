"""
Full-table retrieval for one Notion database.

Notion's search endpoint covers the whole workspace and cannot be scoped to a
database for this object type, so every page is fetched and filtered here by
its parent database id. Order is whatever the API returned; callers sort.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from humble_notion_sync.errors import RemoteApiError
from humble_notion_sync.models import Book, Bundle
from humble_notion_sync.notion.client import NotionClient
from humble_notion_sync.utils.logging_utils import get_logger

PAGE_SIZE = 100  # Notion maximum

T = TypeVar("T")

log = get_logger("fetch")


def normalize_id(value: Optional[str]) -> str:
    """Notion returns hyphenated UUIDs; URLs carry the bare 32-char form."""
    return (value or "").replace("-", "").strip().lower()


def parent_database_id(page: Dict[str, Any]) -> str:
    parent = page.get("parent") or {}
    return normalize_id(parent.get("database_id"))


def iter_search_pages(client: NotionClient, page_size: int = PAGE_SIZE) -> Iterator[Dict[str, Any]]:
    """Yield raw search responses until Notion reports no more pages."""
    cursor: Optional[str] = None
    while True:
        j = client.search(start_cursor=cursor, page_size=page_size)
        yield j
        if not j.get("has_more"):
            break
        cursor = j.get("next_cursor")
        if not cursor:
            # Restarting without a cursor would loop over page 1 forever
            raise RemoteApiError(200, "missing_cursor", "has_more is true but next_cursor is empty")


def fetch_container_pages(client: NotionClient, database_id: str, page_size: int = PAGE_SIZE) -> List[Dict[str, Any]]:
    """Return every page whose parent is ``database_id``, in service order.

    Any request failure propagates; there is no partial result.
    """
    target = normalize_id(database_id)
    out: List[Dict[str, Any]] = []
    for n, j in enumerate(iter_search_pages(client, page_size), start=1):
        results = j.get("results", [])
        kept = [page for page in results if parent_database_id(page) == target]
        out.extend(kept)
        log.debug("Search page %d: %d results, %d kept", n, len(results), len(kept))
    return out


def decode_pages(pages: List[Dict[str, Any]], decode: Callable[[Dict[str, Any]], T]) -> List[T]:
    """Decode each page, skipping (and logging) records whose properties don't fit."""
    out: List[T] = []
    for page in pages:
        try:
            out.append(decode(page))
        except ValueError as e:
            # pydantic's ValidationError is a ValueError too
            log.warning("  ⚠️  Skipping page %s: %s", page.get("id", "?"), e)
    skipped = len(pages) - len(out)
    if skipped:
        log.warning("   %d page(s) could not be read and were skipped", skipped)
    return out


def fetch_bundles(client: NotionClient, database_id: str) -> List[Bundle]:
    log.info("📄 Finding all bundles...")
    bundles = decode_pages(fetch_container_pages(client, database_id), Bundle.from_page)
    log.info("   Found %d bundles", len(bundles))
    return bundles


def fetch_books(client: NotionClient, database_id: str) -> List[Book]:
    log.info("📖 Fetching all books...")
    books = decode_pages(fetch_container_pages(client, database_id), Book.from_page)
    log.info("   Found %d books", len(books))
    return books
