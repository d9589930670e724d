import datetime

import pytest

from humble_notion_sync.bundles.parsing import (
    dedupe_purchases,
    parse_line,
    parse_price,
    parse_purchase_date,
    parse_raw_purchase,
    read_import_file,
)
from humble_notion_sync.models import RawPurchase


def test_parse_line_with_price():
    p = parse_line("Humble Book Bundle: Linux by O'Reilly Dec 9, 2025 $18.00")

    assert p.name == "Humble Book Bundle: Linux by O'Reilly"
    assert p.purchase_date == datetime.date(2025, 12, 9)
    assert p.price == 18.0


@pytest.mark.parametrize("price", ["--", "Gift"])
def test_no_charge_markers_mean_zero(price):
    p = parse_line(f"Humble Choice February Feb 1, 2021 {price}")

    assert p.price == 0.0
    assert p.purchase_date == datetime.date(2021, 2, 1)


def test_full_month_name_and_thousands_separator():
    p = parse_line("Big Bundle September 30, 2019 $1,234.50")

    assert p.purchase_date == datetime.date(2019, 9, 30)
    assert p.price == 1234.5


def test_line_outside_grammar_is_rejected():
    assert parse_line("just some text") is None
    assert parse_line("No Price Bundle Dec 9, 2025") is None


def test_unrecognized_month_yields_no_date():
    p = parse_line("Weird Bundle Smarch 3, 2020 $1.00")

    assert p is not None
    assert p.purchase_date is None


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Dec 9, 2025", datetime.date(2025, 12, 9)),
        ("Sept 1, 2020", datetime.date(2020, 9, 1)),
        ("2024-01-15", datetime.date(2024, 1, 15)),
        ("not a date", None),
        ("", None),
    ],
)
def test_parse_purchase_date(text, expected):
    assert parse_purchase_date(text) == expected


def test_parse_price_edge_cases():
    assert parse_price("$18.00") == 18.0
    assert parse_price("  gift ") == 0.0
    assert parse_price("free") == 0.0


def test_parse_raw_purchase_collapses_whitespace():
    raw = RawPurchase(name="  Humble   Bundle:\n Foo ", date_text="Jan  2,\n2019", price_text="$1.00")

    p = parse_raw_purchase(raw)

    assert p.name == "Humble Bundle: Foo"
    assert p.purchase_date == datetime.date(2019, 1, 2)


def test_read_import_file_splits_parsed_and_rejected(tmp_path):
    path = tmp_path / "bundles.txt"
    path.write_text(
        "Humble Bundle: A Jan 2, 2019 $10.00\n"
        "\n"
        "garbage line\n"
        "Humble Bundle: B Feb 3, 2020 --\n",
        encoding="utf-8",
    )

    parsed, rejected = read_import_file(path)

    assert [p.name for p in parsed] == ["Humble Bundle: A", "Humble Bundle: B"]
    assert rejected == ["garbage line"]


def test_dedupe_purchases_keeps_first_per_name_and_date():
    a1 = parse_line("A Jan 2, 2019 $10.00")
    a2 = parse_line("A Jan 2, 2019 $12.00")
    a3 = parse_line("A Jan 3, 2019 $10.00")

    assert dedupe_purchases([a1, a2, a3]) == [a1, a3]
