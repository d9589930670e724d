import json
from typing import Any, Dict, Iterable, List, Optional

import requests

from humble_notion_sync.errors import ContainerNotFoundError, RemoteApiError, TransportError
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import Settings

NOTION_API_URL = "https://api.notion.com/v1"

log = get_logger("notion")


class NotionClient:
    """Thin wrapper over the Notion REST endpoints the scripts use.

    One attempt per call: a network failure raises TransportError and an
    error status raises RemoteApiError (ContainerNotFoundError for unknown
    database ids). Nothing is retried.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self._token = settings.NOTION_TOKEN
        self._version = settings.NOTION_VERSION
        self.timeout = settings.NOTION_TIMEOUT
        self._session = session or requests.Session()

    def __enter__(self) -> "NotionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Notion-Version": self._version,
            "Content-Type": "application/json",
        }

    def request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{NOTION_API_URL}{path}"
        try:
            r = self._session.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = {"message": r.text[:500]}
            log.error("Notion error: %s", json.dumps(body, ensure_ascii=False))
            code = body.get("code") or ""
            message = body.get("message") or ""
            if r.status_code == 404 and code == "object_not_found":
                raise ContainerNotFoundError(r.status_code, code, message)
            raise RemoteApiError(r.status_code, code, message)

        try:
            return r.json()
        except ValueError as e:
            raise RemoteApiError(r.status_code, "invalid_json", r.text[:200]) from e

    # ---- databases ----

    def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/databases/{database_id}")

    def create_database(self, parent_page_id: str, title: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": [{"type": "text", "text": {"content": title}}],
            "properties": properties,
        }
        return self.request("POST", "/databases", json=payload)

    def ensure_database(self, database_id: str, required: Iterable[str] = ()) -> Dict[str, Any]:
        """Fetch database metadata; warn (don't fail) about missing properties."""
        db = self.retrieve_database(database_id)
        props = db.get("properties", {})
        missing = [p for p in required if p not in props]
        if missing:
            log.warning("Notion DB %s is missing properties: %s", database_id, ", ".join(missing))
        return db

    # ---- search ----

    def search(
        self,
        start_cursor: Optional[str] = None,
        page_size: int = 100,
        object_type: str = "page",
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "filter": {"value": object_type, "property": "object"},
            "page_size": page_size,
        }
        if start_cursor:
            payload["start_cursor"] = start_cursor
        return self.request("POST", "/search", json=payload)

    # ---- pages ----

    def create_page(self, database_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self.request(
            "POST",
            "/pages",
            json={"parent": {"database_id": database_id}, "properties": properties},
        )

    def update_page(
        self,
        page_id: str,
        properties: Optional[Dict[str, Any]] = None,
        archived: Optional[bool] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if properties is not None:
            payload["properties"] = properties
        if archived is not None:
            payload["archived"] = archived
        return self.request("PATCH", f"/pages/{page_id}", json=payload)

    def archive_page(self, page_id: str) -> Dict[str, Any]:
        return self.update_page(page_id, archived=True)


def first_page_id(client: NotionClient) -> Optional[str]:
    """Return any page the integration can see (used as a parent for new databases)."""
    results: List[Dict[str, Any]] = client.search(page_size=1).get("results", [])
    return results[0]["id"] if results else None
