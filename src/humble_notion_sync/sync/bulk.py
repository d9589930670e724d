from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, TypeVar

from pydantic import ValidationError

from humble_notion_sync.errors import HumbleNotionError
from humble_notion_sync.utils.logging_utils import get_logger

T = TypeVar("T")

SKIPPED = "skipped"

log = get_logger("bulk")


@dataclass
class BulkResult:
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    failures: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed + self.skipped


def run_bulk(
    items: Iterable[T],
    action: Callable[[T], Optional[str]],
    describe: Callable[[T], str] = str,
    progress_every: int = 0,
) -> BulkResult:
    """Apply ``action`` to each item, one attempt each.

    A failing item is logged and counted, then the loop moves on. ``action``
    may return ``SKIPPED`` to count an item as skipped instead of succeeded.
    """
    result = BulkResult()
    for item in items:
        label = describe(item)
        try:
            outcome = action(item)
        except (HumbleNotionError, ValidationError, ValueError) as exc:
            log.error("  ✗ Failed: %s: %s", label, exc)
            result.failed += 1
            result.failures.append(label)
            continue

        if outcome == SKIPPED:
            result.skipped += 1
            continue

        result.succeeded += 1
        log.debug("  ✓ %s", label)
        if progress_every and result.succeeded % progress_every == 0:
            log.info("   Processed %d records...", result.succeeded)
    return result
