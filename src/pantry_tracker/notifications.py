"""Turns operation results into user-visible notifications."""

import logging
from typing import Any, Protocol

from .results import Failure, Result

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Anything that can show a success or failure to the user."""

    def notify_success(self, message: str, data: dict[str, Any] | None = None) -> None: ...
    def notify_failure(self, message: str, error_code: str | None = None) -> None: ...


class NotificationDispatcher:
    """Routes session results to a sink, logging each one."""

    def __init__(self, sink: NotificationSink):
        self.sink = sink

    def dispatch(self, result: Result, data: dict[str, Any] | None = None) -> bool:
        """Notify the sink about a result.

        Args:
            result: Outcome of a session operation
            data: Payload to show alongside a success

        Returns:
            True when the result was a success
        """
        if isinstance(result, Failure):
            payload = result.to_dict()
            logger.warning("%s [%s]", payload["error"], result.error_code)
            self.sink.notify_failure(payload["error"], result.error_code)
            return False

        logger.info(result.message)
        self.sink.notify_success(result.message, data)
        return True
