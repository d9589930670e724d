from humble_notion_sync.errors import RemoteApiError
from humble_notion_sync.sync.bulk import SKIPPED, run_bulk


def test_failures_are_counted_and_the_loop_continues():
    seen = []

    def action(item):
        seen.append(item)
        if item == "bad":
            raise RemoteApiError(400, "validation_error", "nope")
        if item == "skip":
            return SKIPPED
        return None

    result = run_bulk(["a", "bad", "skip", "b"], action)

    assert seen == ["a", "bad", "skip", "b"]
    assert (result.succeeded, result.failed, result.skipped) == (2, 1, 1)
    assert result.failures == ["bad"]
    assert result.total == 4


def test_value_errors_count_as_failures():
    def action(item):
        raise ValueError("unsupported")

    result = run_bulk([1, 2], action, describe=lambda i: f"item {i}")

    assert result.failed == 2
    assert result.failures == ["item 1", "item 2"]


def test_empty_input():
    result = run_bulk([], lambda item: None)

    assert result.total == 0
