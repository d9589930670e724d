"""
Bulk edits over existing records.

All of these walk the full container once and write one page at a time; a
record that fails is logged and counted and the walk continues.
"""

from typing import Any, Dict, Optional

import typer

from humble_notion_sync.apps.common import entrypoint, log_bulk, script
from humble_notion_sync.bundles.categories import CATEGORIES, categorize_bundle
from humble_notion_sync.models import BOOK_SCHEMA, BUNDLE_SCHEMA, Book, Bundle
from humble_notion_sync.notion import properties as p
from humble_notion_sync.notion.client import NotionClient
from humble_notion_sync.sync.bulk import SKIPPED, run_bulk
from humble_notion_sync.sync.fetch import fetch_books, fetch_bundles, fetch_container_pages
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import load_settings

BUNDLES_ARG = typer.Argument(None, help="Bundles database id (default: BUNDLES_DB_ID)")
BOOKS_ARG = typer.Argument(None, help="Books database id (default: BOOKS_DB_ID)")
BOOK_TYPE = "Book"

log = get_logger("maintenance")


def _archiver(client: NotionClient):
    def archive(record) -> None:
        client.archive_page(record.id)

    return archive


@script
def update_categories(database_id: Optional[str] = BUNDLES_ARG) -> None:
    """Recompute Bundle Type for every bundle from its name."""
    settings = load_settings()
    db_id = settings.require_bundles_db(database_id)
    log.info("🏷️  Updating bundle categories...")

    counts: Dict[str, int] = {cat: 0 for cat in CATEGORIES}
    with NotionClient(settings) as client:
        bundles = fetch_bundles(client, db_id)

        def apply(b: Bundle) -> None:
            cats = categorize_bundle(b.name)
            client.update_page(b.id, properties={BUNDLE_SCHEMA["bundle_types"]: p.multi_select_prop(cats)})
            for cat in cats:
                counts[cat] = counts.get(cat, 0) + 1

        result = run_bulk(bundles, apply, describe=lambda b: b.name, progress_every=50)

    log_bulk("📊 Update complete:", result, done_label="updated")
    log.info("📈 Category breakdown:")
    for cat, n in sorted(counts.items(), key=lambda kv: kv[1], reverse=True):
        if n:
            log.info("   • %s: %d", cat, n)


@script
def update_bundle_type(database_id: Optional[str] = BUNDLES_ARG) -> None:
    """Set Bundle Type to "Book" on every bundle, whatever the column's type."""
    settings = load_settings()
    db_id = settings.require_bundles_db(database_id)
    column = BUNDLE_SCHEMA["bundle_types"]
    log.info("📚 Setting %s to %r on all bundles...", column, BOOK_TYPE)

    with NotionClient(settings) as client:
        pages = fetch_container_pages(client, db_id)

        def apply(page: Dict[str, Any]) -> None:
            prop_type = p.property_type(page.get("properties", {}), column)
            client.update_page(page["id"], properties={column: p.text_value_for_type(prop_type, BOOK_TYPE)})

        result = run_bulk(
            pages,
            apply,
            describe=lambda pg: p.title_plain(pg.get("properties", {}), BUNDLE_SCHEMA["name"]) or pg["id"],
        )

    log_bulk("📊 Update complete:", result, done_label="updated")


@script
def move_author_to_publisher(database_id: Optional[str] = BOOKS_ARG) -> None:
    """Copy Author into Publisher and clear Author; books without an author are left alone."""
    settings = load_settings()
    db_id = settings.require_books_db(database_id)
    log.info("🔄 Moving Author values into Publisher...")

    with NotionClient(settings) as client:
        books = fetch_books(client, db_id)

        def apply(book: Book) -> Optional[str]:
            if not book.author:
                return SKIPPED
            client.update_page(
                book.id,
                properties={
                    BOOK_SCHEMA["publisher"]: p.rich_text_prop(book.author),
                    BOOK_SCHEMA["author"]: p.rich_text_prop(""),
                },
            )
            log.info("  ✓ %s: %s → Publisher", book.title or book.name, book.author)
            return None

        result = run_bulk(books, apply, describe=lambda b: b.title or b.name)

    log_bulk("📊 Summary:", result, done_label="updated")


@script
def archive_bundles(database_id: Optional[str] = BUNDLES_ARG) -> None:
    """Archive every bundle in the database."""
    settings = load_settings()
    db_id = settings.require_bundles_db(database_id)
    log.info("🗑️  Archiving all bundles...")

    with NotionClient(settings) as client:
        bundles = fetch_bundles(client, db_id)
        if not bundles:
            log.info("No bundles to archive.")
            return
        result = run_bulk(
            bundles,
            _archiver(client),
            describe=lambda b: b.name,
            progress_every=50,
        )

    log_bulk("📊 Archive complete:", result, done_label="archived")


@script
def delete_test_data() -> None:
    """Archive every bundle and every book in the configured databases."""
    settings = load_settings()
    bundles_db = settings.require_bundles_db()
    books_db = settings.require_books_db()
    log.info("🧹 Removing test data...")

    with NotionClient(settings) as client:
        bundles = fetch_bundles(client, bundles_db)
        books = fetch_books(client, books_db)
        bundle_result = run_bulk(bundles, _archiver(client), describe=lambda b: b.name)
        book_result = run_bulk(books, _archiver(client), describe=lambda b: b.name)

    log_bulk("📦 Bundles:", bundle_result, done_label="archived")
    log_bulk("📚 Books:", book_result, done_label="archived")


update_categories_main = entrypoint(update_categories)
update_bundle_type_main = entrypoint(update_bundle_type)
move_author_to_publisher_main = entrypoint(move_author_to_publisher)
archive_bundles_main = entrypoint(archive_bundles)
delete_test_data_main = entrypoint(delete_test_data)
