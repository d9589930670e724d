"""
Shared plumbing for the console scripts.

Every script is a typer command with at most one positional argument. The
``script`` decorator turns any reported failure into exit code 1 after
logging it; ``entrypoint`` produces the callable named in pyproject.
"""

import functools
from typing import Callable

import typer
from pydantic import ValidationError

from humble_notion_sync.errors import ConfigError, HumbleNotionError
from humble_notion_sync.sync.bulk import BulkResult
from humble_notion_sync.utils.logging_utils import get_logger, log_counts

log = get_logger("script")


def script(fn: Callable) -> Callable:
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ConfigError as exc:
            log.error("❌ Configuration error: %s", exc)
        except HumbleNotionError as exc:
            log.error("❌ Error: %s", exc)
        except ValidationError as exc:
            log.error("❌ Unexpected record shape from Notion: %s", exc)
        except UnicodeDecodeError as exc:
            log.error("❌ File is not valid UTF-8: %s", exc)
        except OSError as exc:
            log.error("❌ File error: %s", exc)
        raise typer.Exit(code=1)

    return wrapper


def entrypoint(command: Callable) -> Callable[[], None]:
    def main() -> None:
        typer.run(command)

    main.__name__ = f"{command.__name__}_main"
    main.__doc__ = command.__doc__
    return main


def log_bulk(title: str, result: BulkResult, done_label: str = "succeeded") -> None:
    counts = {done_label: result.succeeded, "failed": result.failed}
    if result.skipped:
        counts["skipped"] = result.skipped
    log_counts(log, title, **counts)
