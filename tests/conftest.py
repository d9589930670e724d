from typing import Any, Dict, List, Optional

import pytest

from humble_notion_sync.errors import RemoteApiError
from humble_notion_sync.utils.settings import Settings

BUNDLES_DB = "11111111-1111-1111-1111-111111111111"
BOOKS_DB = "22222222-2222-2222-2222-222222222222"
OTHER_DB = "33333333-3333-3333-3333-333333333333"


def bundle_page(
    page_id: str,
    name: str,
    price: Optional[float] = None,
    date: Optional[str] = None,
    types: Optional[List[str]] = None,
    db: str = BUNDLES_DB,
) -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "Name": {"type": "title", "title": [{"plain_text": name}]},
        "Purchase Date": {"type": "date", "date": {"start": date} if date else None},
        "Price": {"type": "number", "number": price},
        "Bundle Type": {"type": "multi_select", "multi_select": [{"name": t} for t in (types or [])]},
    }
    return {"object": "page", "id": page_id, "parent": {"type": "database_id", "database_id": db}, "properties": props}


def book_page(page_id: str, title: str, author: str = "", db: str = BOOKS_DB) -> Dict[str, Any]:
    props = {
        "Name": {"type": "title", "title": [{"plain_text": f"{title} by {author}" if author else title}]},
        "Title": {"type": "rich_text", "rich_text": [{"plain_text": title}]},
        "Author": {"type": "rich_text", "rich_text": [{"plain_text": author}] if author else []},
        "Publisher": {"type": "rich_text", "rich_text": []},
        "Bundles": {"type": "relation", "relation": []},
    }
    return {"object": "page", "id": page_id, "parent": {"type": "database_id", "database_id": db}, "properties": props}


class FakeNotion:
    """In-memory stand-in for NotionClient: paged search plus recorded writes."""

    def __init__(self, pages: Optional[List[Dict[str, Any]]] = None, fail_on: Optional[set] = None):
        self.pages = list(pages or [])
        self.fail_on = fail_on or set()
        self.search_calls: List[Dict[str, Any]] = []
        self.created: List[Dict[str, Any]] = []
        self.updated: List[Dict[str, Any]] = []
        self.archived: List[str] = []
        self.databases: List[Dict[str, Any]] = []
        self.closed = False

    # client protocol
    def __call__(self, settings):
        return self

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True

    def search(self, start_cursor=None, page_size=100, object_type="page"):
        self.search_calls.append({"start_cursor": start_cursor, "page_size": page_size})
        start = int(start_cursor or 0)
        chunk = self.pages[start:start + page_size]
        end = start + len(chunk)
        has_more = end < len(self.pages)
        return {"results": chunk, "has_more": has_more, "next_cursor": str(end) if has_more else None}

    def _maybe_fail(self, page_id):
        if page_id in self.fail_on:
            raise RemoteApiError(400, "validation_error", f"cannot write {page_id}")

    def create_page(self, database_id, properties):
        title = (properties.get("Name") or {}).get("title") or [{}]
        self._maybe_fail(title[0].get("text", {}).get("content"))
        page = {"id": f"new-{len(self.created) + 1}", "database_id": database_id, "properties": properties}
        self.created.append(page)
        return page

    def update_page(self, page_id, properties=None, archived=None):
        self._maybe_fail(page_id)
        self.updated.append({"id": page_id, "properties": properties, "archived": archived})
        return {"id": page_id}

    def archive_page(self, page_id):
        self._maybe_fail(page_id)
        self.archived.append(page_id)
        return {"id": page_id, "archived": True}

    def create_database(self, parent_page_id, title, properties):
        db = {"id": f"db-{len(self.databases) + 1}", "parent": parent_page_id, "title": title, "properties": properties}
        self.databases.append(db)
        return db


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        NOTION_TOKEN="secret-token",
        BUNDLES_DB_ID=BUNDLES_DB,
        BOOKS_DB_ID=BOOKS_DB,
        BACKUP_DIR=str(tmp_path / "backups"),
        DEBUG_DIR=str(tmp_path / "debug"),
    )
