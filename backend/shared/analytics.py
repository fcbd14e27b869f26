"""
Analytics event recording.

Services report named events (signup_completed, login_completed, ...)
through IEventRecorder. The default recorder writes one structured log
record per event; a product analytics sink can replace it later without
touching the services.
"""

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Dedicated logger so analytics can be routed separately from app logs
analytics_logger = logging.getLogger("plpg.analytics")


@runtime_checkable
class IEventRecorder(Protocol):
    """Interface for analytics sinks."""

    def record_event(self, name: str, fields: dict[str, Any]) -> None:
        """Record a named event with its metadata bag."""
        ...


class LoggingEventRecorder:
    """Records events as INFO log records on the plpg.analytics logger."""

    def record_event(self, name: str, fields: dict[str, Any]) -> None:
        analytics_logger.info(
            "Auth event: %s",
            name,
            extra={"event": name, "event_fields": fields},
        )


def record_event_safely(
    recorder: IEventRecorder,
    name: str,
    fields: dict[str, Any],
) -> None:
    """
    Record an event, swallowing any recorder failure.

    Analytics is best-effort: a broken sink must never change the result
    of the operation that emitted the event.
    """
    try:
        recorder.record_event(name, fields)
    except Exception:
        logger.warning("Failed to record analytics event %s", name, exc_info=True)
