"""
Getting purchases and books into Notion: from a pasted text file or by
driving a logged-in browser session through the storefront.
"""

import json
from pathlib import Path
from typing import List, Optional

import typer

from humble_notion_sync.apps.common import entrypoint, log_bulk, script
from humble_notion_sync.bundles.parsing import dedupe_purchases, parse_raw_purchase, read_import_file
from humble_notion_sync.errors import ConfigError
from humble_notion_sync.models import ParsedPurchase, RawBook, book_properties, bundle_properties
from humble_notion_sync.notion.client import NotionClient
from humble_notion_sync.scraper.humble import open_storefront
from humble_notion_sync.scraper.library import dedupe_books, match_bundle
from humble_notion_sync.sync.bulk import BulkResult, run_bulk
from humble_notion_sync.sync.fetch import fetch_bundles
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import load_settings

log = get_logger("imports")


def _create_bundles(client: NotionClient, database_id: str, purchases: List[ParsedPurchase]) -> BulkResult:
    def create(purchase: ParsedPurchase) -> None:
        client.create_page(database_id, bundle_properties(purchase))

    return run_bulk(purchases, create, describe=lambda pp: pp.name, progress_every=10)


@script
def import_bundles(
    path: Path = typer.Argument(Path("bundles.txt"), help="Text file with one purchase per line"),
) -> None:
    """Create one bundle per line of a pasted purchase-history text file."""
    settings = load_settings()
    db_id = settings.require_bundles_db()
    if not path.is_file():
        raise ConfigError(f"Import file not found: {path}")

    purchases, rejected = read_import_file(path)
    log.info("📄 Read %d purchases from %s", len(purchases), path)
    for line in rejected:
        log.error("  ✗ Failed to parse: %s", line)

    with NotionClient(settings) as client:
        result = _create_bundles(client, db_id, purchases)

    result.failed += len(rejected)
    result.failures.extend(rejected)
    log_bulk("🎉 Import complete!", result, done_label="imported")


@script
def scrape_purchases() -> None:
    """Log in to the storefront and create a bundle for every purchase."""
    settings = load_settings()
    db_id = settings.require_bundles_db()
    credentials = settings.storefront_credentials()

    with open_storefront(settings) as store:
        store.login(credentials)
        raw = store.list_purchases()

    purchases = dedupe_purchases([parse_raw_purchase(r) for r in raw])
    log.info("📦 %d unique purchases (%d rows scraped)", len(purchases), len(raw))
    if not purchases:
        log.warning("⚠️  Nothing to import.")
        return

    with NotionClient(settings) as client:
        result = _create_bundles(client, db_id, purchases)

    log_bulk("🎉 Import complete!", result, done_label="imported")


@script
def scrape_library_books() -> None:
    """Scrape library tiles and create a book page linked to its bundle."""
    settings = load_settings()
    bundles_db = settings.require_bundles_db()
    books_db = settings.require_books_db()
    credentials = settings.storefront_credentials()

    with NotionClient(settings) as client:
        bundles = fetch_bundles(client, bundles_db)

        with open_storefront(settings) as store:
            store.login(credentials)
            books = dedupe_books(store.list_library_books())
        log.info("📚 %d unique books found", len(books))

        matched = 0

        def create(book: RawBook) -> None:
            nonlocal matched
            bundle = match_bundle(book.bundle_name, bundles)
            ids = [bundle.id] if bundle else []
            client.create_page(books_db, book_properties(book, bundle_ids=ids))
            if bundle:
                matched += 1
                log.info("  ✓ %s → %s", book.display_name, bundle.name)
            else:
                log.info("  ✓ %s (no matching bundle)", book.display_name)

        result = run_bulk(books, create, describe=lambda b: b.display_name, progress_every=25)

    log_bulk("🎉 Book import complete!", result, done_label="imported")
    log.info("   • Linked to a bundle: %d", matched)


@script
def explore_library(
    out: Path = typer.Argument(Path("library-analysis.json"), help="Where to write the analysis"),
) -> None:
    """Dump candidate selectors and a markup sample from the library page."""
    settings = load_settings()
    credentials = settings.storefront_credentials()

    with open_storefront(settings) as store:
        store.login(credentials)
        analysis = store.analyze_library()

    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(analysis, ensure_ascii=False, indent=2), encoding="utf-8")
    log.info("🔎 Library analysis written to %s", out)
    for found in analysis.get("possible_containers") or []:
        log.info("   • %s: %s elements", found.get("selector"), found.get("count"))


import_bundles_main = entrypoint(import_bundles)
scrape_purchases_main = entrypoint(scrape_purchases)
scrape_library_books_main = entrypoint(scrape_library_books)
explore_library_main = entrypoint(explore_library)
