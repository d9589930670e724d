"""
One-off workspace setup: create the two databases and seed them with a
small, recognisable sample.
"""

import datetime
from typing import Optional

import typer

from humble_notion_sync.apps.common import entrypoint, script
from humble_notion_sync.errors import ConfigError
from humble_notion_sync.models import (
    ParsedPurchase,
    RawBook,
    book_properties,
    books_database_properties,
    bundle_properties,
    bundles_database_properties,
)
from humble_notion_sync.notion.client import NotionClient, first_page_id
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import load_settings

BUNDLES_DB_TITLE = "Humble Bundles"
BOOKS_DB_TITLE = "Humble Bundle Books"

SAMPLE_BUNDLES = [
    ParsedPurchase(name="Programming Essentials Bundle 2024", purchase_date=datetime.date(2024, 1, 15)),
    ParsedPurchase(name="Web Development Mega Bundle 2024", purchase_date=datetime.date(2024, 3, 22)),
]

# (book, publisher, indexes into SAMPLE_BUNDLES)
SAMPLE_BOOKS = [
    (RawBook(title="Clean Code", author="Robert C. Martin"), "Prentice Hall", (0, 1)),
    (RawBook(title="Design Patterns", author="Gang of Four"), "Addison-Wesley", (0,)),
    (RawBook(title="JavaScript: The Good Parts", author="Douglas Crockford"), "O'Reilly Media", (1,)),
]

log = get_logger("setup")


@script
def create_databases(
    parent_page_id: Optional[str] = typer.Argument(None, help="Parent page id (default: first page the integration sees)"),
) -> None:
    """Create the Bundles and Books databases under one parent page."""
    settings = load_settings()

    with NotionClient(settings) as client:
        parent = (parent_page_id or "").strip()
        if not parent:
            log.info("📄 Finding parent page...")
            parent = first_page_id(client) or ""
            if not parent:
                raise ConfigError("No pages shared with the integration; pass a parent page id")

        log.info("📦 Creating Bundles database...")
        bundles_db = client.create_database(parent, BUNDLES_DB_TITLE, bundles_database_properties())
        log.info("✅ Bundles database created: %s", bundles_db["id"])

        log.info("📖 Creating Books database...")
        books_db = client.create_database(parent, BOOKS_DB_TITLE, books_database_properties(bundles_db["id"]))
        log.info("✅ Books database created: %s", books_db["id"])

    log.info("✨ Save these database IDs in your .env:")
    log.info('   BUNDLES_DB_ID="%s"', bundles_db["id"])
    log.info('   BOOKS_DB_ID="%s"', books_db["id"])


@script
def add_sample_data() -> None:
    """Create two sample bundles and three books, one shared by both bundles."""
    settings = load_settings()
    bundles_db = settings.require_bundles_db()
    books_db = settings.require_books_db()

    with NotionClient(settings) as client:
        log.info("📦 Adding sample bundles...")
        bundle_ids = []
        for purchase in SAMPLE_BUNDLES:
            page = client.create_page(bundles_db, bundle_properties(purchase))
            bundle_ids.append(page["id"])
            log.info("  ✓ %s", purchase.name)

        log.info("📚 Adding sample books...")
        for book, publisher, related in SAMPLE_BOOKS:
            ids = [bundle_ids[i] for i in related]
            client.create_page(books_db, book_properties(book, bundle_ids=ids, publisher=publisher))
            log.info("  ✓ %s (%d bundle%s)", book.display_name, len(ids), "" if len(ids) == 1 else "s")

    log.info("🎉 Sample data added: %d bundles, %d books", len(SAMPLE_BUNDLES), len(SAMPLE_BOOKS))


create_databases_main = entrypoint(create_databases)
add_sample_data_main = entrypoint(add_sample_data)
