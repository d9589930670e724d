import csv
import datetime
import json

from humble_notion_sync.bundles.backup import CSV_HEADER, backup_timestamp, write_backup
from humble_notion_sync.models import Bundle

NOW = datetime.datetime(2025, 3, 4, 5, 6, 7, tzinfo=datetime.timezone.utc)


def _bundles():
    return [
        Bundle(id="p2", name="Undated", price=None),
        Bundle(
            id="p1",
            name='Humble "Quoted" Bundle; part 2',
            purchase_date=datetime.date(2020, 1, 1),
            price=12.5,
            bundle_types=["Books", "Comics/Manga"],
        ),
    ]


def test_timestamp_is_filesystem_safe():
    assert backup_timestamp(NOW) == "2025-03-04T05-06-07"


def test_write_backup_creates_directory_and_both_files(tmp_path):
    target = tmp_path / "nested" / "backups"

    files = write_backup(_bundles(), "db-1", target, now=NOW)

    assert files.count == 2
    assert files.json_path == target / "humble-bundles-backup-2025-03-04T05-06-07.json"
    assert files.csv_path.exists()


def test_json_document_structure(tmp_path):
    files = write_backup(_bundles(), "db-1", tmp_path, now=NOW)

    doc = json.loads(files.json_path.read_text(encoding="utf-8"))

    assert doc["backup_date"] == NOW.isoformat()
    assert doc["database_id"] == "db-1"
    assert doc["total_bundles"] == 2
    # oldest first, undated last
    assert [x["id"] for x in doc["bundles"]] == ["p1", "p2"]
    assert doc["bundles"][0]["purchase_date"] == "2020-01-01"
    assert doc["bundles"][0]["bundle_types"] == ["Books", "Comics/Manga"]


def test_csv_round_trips_quotes_and_delimiter(tmp_path):
    files = write_backup(_bundles(), "db-1", tmp_path, now=NOW)

    with files.csv_path.open(encoding="utf-8", newline="") as fh:
        rows = list(csv.reader(fh))

    assert rows[0] == CSV_HEADER
    name, date, price, types, page_id = rows[1]
    assert name == 'Humble "Quoted" Bundle; part 2'
    assert date == "2020-01-01"
    assert float(price) == 12.5
    assert types.split("; ") == ["Books", "Comics/Manga"]
    assert page_id == "p1"
    assert rows[2][:3] == ["Undated", "", "0.0"]


def test_empty_database_still_writes_header(tmp_path):
    files = write_backup([], "db-1", tmp_path, now=NOW)

    assert files.count == 0
    assert files.csv_path.read_text(encoding="utf-8").strip() == ",".join(f'"{h}"' for h in CSV_HEADER)
