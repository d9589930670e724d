"""
Write-once snapshots of the Bundles database.

Each run produces a pair of files sharing one timestamp:

  • humble-bundles-backup-<ts>.json   (full dump with metadata)
  • humble-bundles-backup-<ts>.csv    (flattened, one row per bundle)
"""

from __future__ import annotations

import csv
import datetime
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from humble_notion_sync.bundles.stats import sort_by_purchase_date
from humble_notion_sync.models import Bundle

FILE_PREFIX = "humble-bundles-backup"
CSV_HEADER = ["Name", "Purchase Date", "Price", "Bundle Types", "ID"]
TYPES_DELIMITER = "; "


@dataclass
class BackupFiles:
    json_path: Path
    csv_path: Path
    count: int


def backup_timestamp(now: datetime.datetime) -> str:
    # Filesystem-safe: no colons or dots
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def build_backup_document(bundles: List[Bundle], database_id: str, now: datetime.datetime) -> Dict[str, Any]:
    return {
        "backup_date": now.isoformat(),
        "database_id": database_id,
        "total_bundles": len(bundles),
        "bundles": [b.model_dump(mode="json") for b in bundles],
    }


def csv_row(bundle: Bundle) -> List[Any]:
    return [
        bundle.name,
        bundle.purchase_date.isoformat() if bundle.purchase_date else "",
        bundle.price if bundle.price is not None else 0.0,
        TYPES_DELIMITER.join(bundle.bundle_types),
        bundle.id,
    ]


def write_csv(path: Path, bundles: List[Bundle]) -> None:
    # QUOTE_NONNUMERIC: strings quoted with "" escaping, prices left bare
    with path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, quoting=csv.QUOTE_NONNUMERIC)
        writer.writerow(CSV_HEADER)
        for b in bundles:
            writer.writerow(csv_row(b))


def write_backup(
    bundles: List[Bundle],
    database_id: str,
    backup_dir: Path,
    now: Optional[datetime.datetime] = None,
) -> BackupFiles:
    """Sort bundles oldest-first and write the JSON + CSV pair into ``backup_dir``."""
    now = now or datetime.datetime.now(datetime.timezone.utc)
    backup_dir.mkdir(parents=True, exist_ok=True)

    ordered = sort_by_purchase_date(bundles)
    stem = f"{FILE_PREFIX}-{backup_timestamp(now)}"
    json_path = backup_dir / f"{stem}.json"
    csv_path = backup_dir / f"{stem}.csv"

    json_path.write_text(
        json.dumps(build_backup_document(ordered, database_id, now), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    write_csv(csv_path, ordered)
    return BackupFiles(json_path=json_path, csv_path=csv_path, count=len(ordered))
