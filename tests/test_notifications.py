"""Tests for results and notification dispatch."""

import logging

from pantry_tracker.errors import DuplicateEntryError, NotFoundError, UpstreamError
from pantry_tracker.notifications import NotificationDispatcher
from pantry_tracker.results import Failure, Success


class RecordingSink:
    """Sink that remembers what it was told."""

    def __init__(self):
        self.successes = []
        self.failures = []

    def notify_success(self, message, data=None):
        self.successes.append((message, data))

    def notify_failure(self, message, error_code=None):
        self.failures.append((message, error_code))


class TestResults:
    """Tests for Success and Failure."""

    def test_success(self):
        result = Success(42, "Done")
        assert result.ok is True
        assert result.value == 42

    def test_failure_to_dict(self):
        result = Failure(UpstreamError("timeout"), "Error fetching data")
        assert result.ok is False
        assert result.to_dict() == {
            "success": False,
            "error": "Error fetching data: timeout",
            "error_code": "UPSTREAM_ERROR",
        }

    def test_failure_without_message(self):
        result = Failure(NotFoundError("shopping_list", "abc"))
        assert result.to_dict()["error"] == "Record 'abc' not found in shopping_list"

    def test_duplicate_error_message(self):
        error = DuplicateEntryError("Moong Dal", 2, "kg")
        assert str(error) == "'Moong Dal' is already on the shopping list (2 kg)"
        assert Failure(error).error_code == "DUPLICATE_ITEM"


class TestNotificationDispatcher:
    """Tests for NotificationDispatcher."""

    def test_success_notifies(self):
        sink = RecordingSink()
        dispatched = NotificationDispatcher(sink).dispatch(
            Success(None, "Milk has been added to your shopping list."), {"count": 1}
        )
        assert dispatched is True
        assert sink.successes == [("Milk has been added to your shopping list.", {"count": 1})]
        assert sink.failures == []

    def test_failure_notifies(self):
        sink = RecordingSink()
        dispatched = NotificationDispatcher(sink).dispatch(
            Failure(UpstreamError("timeout"), "Error adding item")
        )
        assert dispatched is False
        assert sink.failures == [("Error adding item: timeout", "UPSTREAM_ERROR")]

    def test_failure_is_logged(self, caplog):
        sink = RecordingSink()
        with caplog.at_level(logging.WARNING, logger="pantry_tracker.notifications"):
            NotificationDispatcher(sink).dispatch(
                Failure(UpstreamError("timeout"), "Error adding item")
            )
        assert "Error adding item: timeout" in caplog.text
