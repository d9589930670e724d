"""
Aggregates over an in-memory list of bundles.

Each function is a single pass with a grouping or reducing key; the report
scripts only format what these return.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from humble_notion_sync.models import Bundle

UNKNOWN_YEAR = "Unknown"
UNCATEGORIZED = "Uncategorized"


@dataclass
class TotalSpent:
    total: float = 0.0
    with_price: int = 0
    without_price: int = 0


@dataclass
class Bucket:
    total: float = 0.0
    count: int = 0
    titles: List[str] = field(default_factory=list)

    def add(self, title: str, price: float) -> None:
        self.total += price
        self.count += 1
        self.titles.append(title)

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


@dataclass
class GroupedSpending:
    groups: Dict[str, Bucket]
    total: float = 0.0
    with_price: int = 0
    without_date: int = 0

    def share(self, key: str) -> float:
        """Percentage of the overall total attributed to ``key``."""
        return (self.groups[key].total / self.total * 100) if self.total else 0.0


@dataclass
class Purchase:
    date: Optional[datetime.date]
    price: float


@dataclass
class DuplicateGroup:
    name: str
    purchases: List[Purchase]

    @property
    def count(self) -> int:
        return len(self.purchases)

    @property
    def wasted(self) -> float:
        # The first purchase was wanted; every later one is waste
        return sum(p.price for p in self.purchases[1:])


@dataclass
class DuplicateReport:
    duplicates: List[DuplicateGroup]
    total_entries: int
    unique_names: int

    @property
    def extra_purchases(self) -> int:
        return sum(d.count - 1 for d in self.duplicates)

    @property
    def wasted(self) -> float:
        return sum(d.wasted for d in self.duplicates)


@dataclass
class DateRange:
    earliest: datetime.date
    earliest_name: str
    latest: datetime.date
    latest_name: str
    with_date: int

    @property
    def days(self) -> int:
        return (self.latest - self.earliest).days

    @property
    def years(self) -> float:
        return round(self.days / 365.25, 1)


def _has_price(b: Bundle) -> bool:
    return b.price is not None and b.price > 0


def total_spent(bundles: List[Bundle]) -> TotalSpent:
    out = TotalSpent()
    for b in bundles:
        if b.price is None:
            out.without_price += 1
            continue
        out.total += b.price
        out.with_price += 1
    return out


def spending_by_year(bundles: List[Bundle]) -> GroupedSpending:
    """Priced bundles per purchase year; years ascending, Unknown last."""
    buckets: Dict[str, Bucket] = {}
    result = GroupedSpending(groups={})
    for b in bundles:
        if not _has_price(b):
            continue
        result.total += b.price
        result.with_price += 1
        if b.purchase_date:
            key = str(b.purchase_date.year)
        else:
            key = UNKNOWN_YEAR
            result.without_date += 1
        buckets.setdefault(key, Bucket()).add(b.name, b.price)

    years = sorted((k for k in buckets if k != UNKNOWN_YEAR), key=int)
    if UNKNOWN_YEAR in buckets:
        years.append(UNKNOWN_YEAR)
    result.groups = {y: buckets[y] for y in years}
    return result


def spending_by_category(bundles: List[Bundle]) -> GroupedSpending:
    """Priced bundles per category tag, highest total first.

    A bundle with several tags counts toward each, so the group totals can
    exceed the overall total.
    """
    buckets: Dict[str, Bucket] = {}
    result = GroupedSpending(groups={})
    for b in bundles:
        if not _has_price(b):
            continue
        result.total += b.price
        result.with_price += 1
        for cat in (b.bundle_types or [UNCATEGORIZED]):
            buckets.setdefault(cat, Bucket()).add(b.name, b.price)

    ordered = sorted(buckets.items(), key=lambda kv: kv[1].total, reverse=True)
    result.groups = dict(ordered)
    return result


def find_duplicates(bundles: List[Bundle]) -> DuplicateReport:
    """Names bought more than once, most-repeated first, purchases in date order."""
    groups: Dict[str, List[Purchase]] = {}
    for b in bundles:
        groups.setdefault(b.name, []).append(Purchase(date=b.purchase_date, price=b.price or 0.0))

    duplicates: List[DuplicateGroup] = []
    for name, purchases in groups.items():
        if len(purchases) < 2:
            continue
        # Undated purchases sort last; sort is stable for ties
        purchases.sort(key=lambda p: (p.date is None, p.date or datetime.date.min))
        duplicates.append(DuplicateGroup(name=name, purchases=purchases))

    duplicates.sort(key=lambda d: d.count, reverse=True)
    return DuplicateReport(duplicates=duplicates, total_entries=len(bundles), unique_names=len(groups))


def date_range(bundles: List[Bundle]) -> Optional[DateRange]:
    """Earliest and latest purchase; None when no bundle carries a date."""
    dated = [b for b in bundles if b.purchase_date]
    if not dated:
        return None
    first = min(dated, key=lambda b: b.purchase_date)
    last = max(dated, key=lambda b: b.purchase_date)
    return DateRange(
        earliest=first.purchase_date,
        earliest_name=first.name,
        latest=last.purchase_date,
        latest_name=last.name,
        with_date=len(dated),
    )


def sort_by_purchase_date(bundles: List[Bundle]) -> List[Bundle]:
    """Oldest first; bundles without a date go last."""
    return sorted(bundles, key=lambda b: (b.purchase_date is None, b.purchase_date or datetime.date.min))
