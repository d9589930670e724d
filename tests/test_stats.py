import datetime

from humble_notion_sync.bundles import stats
from humble_notion_sync.models import Bundle


def b(name, price=None, date=None, types=None, id_=None):
    return Bundle(
        id=id_ or name,
        name=name,
        price=price,
        purchase_date=datetime.date.fromisoformat(date) if date else None,
        bundle_types=types or [],
    )


def test_total_spent_counts_priced_and_unpriced():
    t = stats.total_spent([b("A", 10.0), b("B", 0.0), b("C")])

    assert t.total == 10.0
    assert t.with_price == 2
    assert t.without_price == 1


def test_duplicates_wasted_is_every_purchase_after_the_first():
    bundles = [
        b("A", 10.0, "2020-01-01", id_="a1"),
        b("A", 5.0, "2021-01-01", id_="a2"),
        b("B", 7.0, "2020-06-01"),
    ]

    report = stats.find_duplicates(bundles)

    assert [d.name for d in report.duplicates] == ["A"]
    assert report.duplicates[0].count == 2
    assert report.wasted == 5.0
    assert report.extra_purchases == 1
    assert report.total_entries == 3
    assert report.unique_names == 2


def test_duplicate_purchases_are_ordered_by_date_before_counting_waste():
    bundles = [
        b("A", 5.0, "2022-01-01", id_="later"),
        b("A", 12.0, "2019-01-01", id_="first"),
        b("A", 3.0, None, id_="undated"),
    ]

    dup = stats.find_duplicates(bundles).duplicates[0]

    assert [p.price for p in dup.purchases] == [12.0, 5.0, 3.0]
    assert dup.wasted == 8.0


def test_date_range_uses_calendar_days():
    span = stats.date_range([b("Late", date="2023-01-01"), b("Early", date="2020-01-01"), b("None")])

    assert span.days == 1096
    assert span.years == 3.0
    assert span.earliest_name == "Early"
    assert span.latest_name == "Late"
    assert span.with_date == 2


def test_date_range_without_dates_is_none():
    assert stats.date_range([b("A"), b("B", 5.0)]) is None


def test_spending_by_year_orders_years_and_puts_unknown_last():
    report = stats.spending_by_year([
        b("A", 10.0, "2021-03-01"),
        b("B", 5.0),
        b("C", 20.0, "2019-12-31"),
        b("D", 2.0, "2021-07-01"),
        b("Free", 0.0, "2018-01-01"),
    ])

    assert list(report.groups) == ["2019", "2021", "Unknown"]
    assert report.groups["2021"].total == 12.0
    assert report.groups["2021"].count == 2
    assert report.groups["2021"].average == 6.0
    assert report.total == 37.0
    assert report.with_price == 4
    assert report.without_date == 1
    assert round(report.share("2019"), 1) == 54.1


def test_spending_by_category_counts_each_tag_and_sorts_by_total():
    report = stats.spending_by_category([
        b("Comics", 15.0, types=["Comics/Manga", "Books"]),
        b("Books", 10.0, types=["Books"]),
        b("Plain", 4.0),
        b("Odd", 1.0, types=["Audio"]),
    ])

    assert list(report.groups) == ["Books", "Comics/Manga", "Uncategorized", "Audio"]
    assert report.groups["Books"].total == 25.0
    assert report.total == 30.0


def test_sort_by_purchase_date_puts_undated_last():
    ordered = stats.sort_by_purchase_date([b("X"), b("New", date="2024-01-01"), b("Old", date="2010-01-01")])

    assert [x.name for x in ordered] == ["Old", "New", "X"]
