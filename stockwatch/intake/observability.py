"""Structured observability events for inbound message handling."""

from __future__ import annotations

import enum
import typing as typ

from stockwatch.logging import get_logger, log_info, log_warning

if typ.TYPE_CHECKING:
    from stockwatch.dispatch.models import DispatchOutcome
    from stockwatch.intake.errors import MalformedEvent
    from stockwatch.logging import SupportsLog

logger = get_logger(__name__)


class IntakeEventType(enum.StrEnum):
    """Structured log event types for the intake boundary."""

    MESSAGE_REJECTED = "intake.message.rejected"
    OUTCOME_REPORTED = "intake.outcome.reported"


class IntakeEventLogger:
    """Emit structured intake events via femtologging."""

    def __init__(self, *, log: SupportsLog | None = None) -> None:
        """Initialise with an optional logger override."""
        self._log = log or logger

    def log_message_rejected(self, error: MalformedEvent) -> None:
        """Log a message that could not be parsed and was skipped."""
        log_warning(
            self._log,
            "[%s] error_type=%s error_message=%s",
            IntakeEventType.MESSAGE_REJECTED,
            type(error).__name__,
            str(error),
        )

    def log_outcome(self, outcome: DispatchOutcome) -> None:
        """Surface a dispatch outcome; degraded outcomes log at WARNING."""
        log_fn = log_info if outcome.succeeded else log_warning
        log_fn(
            self._log,
            "[%s] product_id=%d status=%s users_notified=%d users_failed=%d "
            "query_error=%s",
            IntakeEventType.OUTCOME_REPORTED,
            outcome.product_id,
            outcome.status,
            outcome.users_notified,
            len(outcome.users_failed),
            outcome.query_error,
        )
