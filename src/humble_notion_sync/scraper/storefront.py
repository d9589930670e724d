from abc import ABC, abstractmethod
from typing import Any, Dict, List

from humble_notion_sync.models import RawBook, RawPurchase
from humble_notion_sync.utils.settings import StorefrontCredentials


class Storefront(ABC):
    """What the import scripts need from a store, independent of its markup."""

    @abstractmethod
    def login(self, credentials: StorefrontCredentials) -> None:
        """Authenticate the browser session; raise ScrapeError on failure."""

    @abstractmethod
    def list_purchases(self) -> List[RawPurchase]:
        """Every row of the purchase history, in display order."""

    @abstractmethod
    def list_library_books(self) -> List[RawBook]:
        """Every item tile in the library, duplicates included."""

    @abstractmethod
    def analyze_library(self) -> Dict[str, Any]:
        """Describe the library markup (for updating selectors)."""
