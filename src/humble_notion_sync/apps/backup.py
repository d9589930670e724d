from pathlib import Path
from typing import Optional

import typer

from humble_notion_sync.apps.common import entrypoint, script
from humble_notion_sync.bundles.backup import write_backup
from humble_notion_sync.notion.client import NotionClient
from humble_notion_sync.sync.fetch import fetch_bundles
from humble_notion_sync.utils.logging_utils import get_logger
from humble_notion_sync.utils.settings import load_settings

log = get_logger("backup")


@script
def backup_bundles(
    database_id: Optional[str] = typer.Argument(None, help="Bundles database id (default: BUNDLES_DB_ID)"),
) -> None:
    """Snapshot the Bundles database to timestamped JSON and CSV files."""
    settings = load_settings()
    db_id = settings.require_bundles_db(database_id)
    log.info("💾 Backing up Humble Bundle data...")

    with NotionClient(settings) as client:
        bundles = fetch_bundles(client, db_id)

    files = write_backup(bundles, db_id, Path(settings.BACKUP_DIR))
    log.info("✅ Backup complete: %d bundles", files.count)
    log.info("   • JSON: %s", files.json_path)
    log.info("   • CSV:  %s", files.csv_path)


backup_bundles_main = entrypoint(backup_bundles)
