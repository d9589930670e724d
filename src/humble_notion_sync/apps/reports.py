"""
Read-only reports over the Bundles database.

Each command fetches every bundle once, computes one aggregate from
``bundles.stats`` and logs it. The optional argument overrides BUNDLES_DB_ID.
"""

from typing import List, Optional

import typer

from humble_notion_sync.apps.common import entrypoint, script
from humble_notion_sync.bundles import stats
from humble_notion_sync.bundles.categories import CATEGORIES, group_by_primary_category
from humble_notion_sync.models import Bundle
from humble_notion_sync.notion.client import NotionClient
from humble_notion_sync.sync.fetch import fetch_bundles
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import load_settings

DB_ARG = typer.Argument(None, help="Bundles database id (default: BUNDLES_DB_ID)")
RULE = "━" * 46

log = get_logger("reports")


def _load_bundles(database_id: Optional[str]) -> List[Bundle]:
    settings = load_settings()
    db_id = settings.require_bundles_db(database_id)
    with NotionClient(settings) as client:
        return fetch_bundles(client, db_id)


@script
def total_spent(database_id: Optional[str] = DB_ARG) -> None:
    """Sum every bundle price."""
    log.info("💰 Calculating total spent on Humble Bundles...")
    bundles = _load_bundles(database_id)
    for b in bundles:
        log.info("  %s: %s", b.name, f"${b.price:.2f}" if b.price is not None else "(no price)")

    t = stats.total_spent(bundles)
    log.info("💵 Total Spent: $%.2f", t.total)
    log.info("📊 Summary:")
    log.info("   • Total bundles: %d", len(bundles))
    log.info("   • Bundles with price: %d", t.with_price)
    log.info("   • Bundles without price: %d", t.without_price)


@script
def spending_by_year(database_id: Optional[str] = DB_ARG) -> None:
    """Group priced bundles by purchase year."""
    log.info("💰 Calculating spending per year...")
    report = stats.spending_by_year(_load_bundles(database_id))

    log.info(RULE)
    log.info("💵 SPENDING BY YEAR")
    log.info(RULE)
    for year, bucket in report.groups.items():
        log.info(
            "%s $%10.2f  (%d bundles, %.1f%%, avg: $%.2f)",
            year.ljust(10), bucket.total, bucket.count, report.share(year), bucket.average,
        )
    log.info(RULE)
    log.info("TOTAL SPENT:   $%10.2f", report.total)
    log.info("📊 Summary:")
    log.info("   • Total bundles with price: %d", report.with_price)
    log.info("   • Bundles without date: %d", report.without_date)
    log.info("   • Years covered: %d", len([y for y in report.groups if y != stats.UNKNOWN_YEAR]))


@script
def spending_by_category(database_id: Optional[str] = DB_ARG) -> None:
    """Group priced bundles by Bundle Type tag."""
    log.info("💰 Calculating spending per category...")
    report = stats.spending_by_category(_load_bundles(database_id))

    log.info(RULE)
    log.info("💵 SPENDING BY CATEGORY")
    log.info(RULE)
    for category, bucket in report.groups.items():
        log.info(
            "%s $%10.2f  (%d bundles, %.1f%%)",
            category.ljust(20), bucket.total, bucket.count, report.share(category),
        )
    log.info(RULE)
    log.info("TOTAL SPENT:         $%10.2f", report.total)
    log.info("📊 Summary:")
    log.info("   • Total bundles with price: %d", report.with_price)
    log.info("   • Total categories assigned: %d", len(report.groups))
    log.info("⚠️  Bundles can have multiple categories, so category totals may exceed total spent.")


@script
def date_range(database_id: Optional[str] = DB_ARG) -> None:
    """Earliest and latest purchase and the span between them."""
    log.info("📅 Calculating purchase date range...")
    bundles = _load_bundles(database_id)
    span = stats.date_range(bundles)
    if span is None:
        log.warning("⚠️  No purchase dates found in the database.")
        return

    log.info("📊 Purchase Date Range:")
    log.info("   First purchase: %s  (%s)", span.earliest.isoformat(), span.earliest_name)
    log.info("   Last purchase:  %s  (%s)", span.latest.isoformat(), span.latest_name)
    log.info("⏱️  Time span: %d days (%.1f years)", span.days, span.years)
    log.info("   • Total bundles: %d", len(bundles))
    log.info("   • Bundles with date: %d", span.with_date)


@script
def find_duplicates(database_id: Optional[str] = DB_ARG) -> None:
    """Bundles bought more than once, and what the repeats cost."""
    log.info("🔍 Finding duplicate bundle purchases...")
    report = stats.find_duplicates(_load_bundles(database_id))
    if not report.duplicates:
        log.info("✅ No duplicate purchases found! Every bundle was purchased only once.")
        return

    log.info("🔄 DUPLICATE PURCHASES (%d bundles purchased more than once):", len(report.duplicates))
    for dup in report.duplicates:
        log.info("📦 %s", dup.name)
        log.info("   Purchased %d times:", dup.count)
        for idx, p in enumerate(dup.purchases, start=1):
            log.info("     %d. %s - $%.2f", idx, p.date.isoformat() if p.date else "(no date)", p.price)

    log.info("📊 SUMMARY:")
    log.info("   • Total bundle entries in database: %d", report.total_entries)
    log.info("   • Unique bundles: %d", report.unique_names)
    log.info("   • Bundles purchased more than once: %d", len(report.duplicates))
    log.info("   • Total duplicate/over-purchases: %d", report.extra_purchases)
    log.info("   • Money wasted on duplicates: $%.2f", report.wasted)


@script
def identify_bundles(database_id: Optional[str] = DB_ARG) -> None:
    """List bundle names under their primary category."""
    log.info("🎮 Identifying game bundles...")
    bundles = _load_bundles(database_id)
    groups = group_by_primary_category([b.name for b in bundles])

    for category in CATEGORIES:
        log.info("%s BUNDLES (%d):", category.upper(), len(groups[category]))
        for title in groups[category]:
            log.info("   • %s", title)

    log.info("📊 SUMMARY:")
    for category in CATEGORIES:
        log.info("   • %s: %d", category, len(groups[category]))
    log.info("   • Total: %d", len(bundles))


total_spent_main = entrypoint(total_spent)
spending_by_year_main = entrypoint(spending_by_year)
spending_by_category_main = entrypoint(spending_by_category)
date_range_main = entrypoint(date_range)
find_duplicates_main = entrypoint(find_duplicates)
identify_bundles_main = entrypoint(identify_bundles)
