"""Structured observability events for product-available dispatches.

Every step of a dispatch emits one pre-formatted femtologging record of the
form ``[<event type>] key=value ...`` so log aggregators can follow exactly
which users were and were not notified, and why.

Usage
-----
>>> event_logger = DispatchEventLogger()
>>> event_logger.log_event_received(product_id=42, available_on=date)

"""

from __future__ import annotations

import enum
import typing as typ

from stockwatch.alerts.errors import DirectoryProtocolError, DirectoryUnavailable
from stockwatch.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

    from stockwatch.alerts.models import AlertedUser
    from stockwatch.dispatch.models import DispatchOutcome
    from stockwatch.logging import SupportsLog

logger = get_logger(__name__)


class DispatchEventType(enum.StrEnum):
    """Structured log event types for dispatch runs."""

    EVENT_RECEIVED = "dispatch.event.received"
    QUERY_FAILED = "dispatch.query.failed"
    NO_USERS = "dispatch.users.none"
    DELIVERY_SUCCEEDED = "dispatch.delivery.succeeded"
    DELIVERY_FAILED = "dispatch.delivery.failed"
    COMPLETED = "dispatch.completed"


class ErrorCategory(enum.StrEnum):
    """Categories for directory failures in alerts."""

    TRANSIENT = "transient"
    SCHEMA_DRIFT = "schema_drift"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (DirectoryUnavailable, ErrorCategory.TRANSIENT),
    (DirectoryProtocolError, ErrorCategory.SCHEMA_DRIFT),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize a directory failure for alert routing."""
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class DispatchEventLogger:
    """Emit structured dispatch events via femtologging.

    Parameters
    ----------
    log
        Optional logger override; defaults to this module's logger.

    """

    def __init__(self, *, log: SupportsLog | None = None) -> None:
        """Initialise with an optional logger override."""
        self._log = log or logger

    def log_event_received(self, *, product_id: int, available_on: dt.date) -> None:
        """Log that an event reached the coordinator."""
        log_info(
            self._log,
            "[%s] product_id=%d available_on=%s",
            DispatchEventType.EVENT_RECEIVED,
            product_id,
            available_on.isoformat(),
        )

    def log_query_failed(self, *, product_id: int, error: BaseException) -> None:
        """Log a directory failure that aborted the dispatch."""
        log_error(
            self._log,
            "[%s] product_id=%d error_type=%s error_category=%s error_message=%s",
            DispatchEventType.QUERY_FAILED,
            product_id,
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )

    def log_no_users(self, *, product_id: int, available_on: dt.date) -> None:
        """Log that nobody registered an alert for the product and date."""
        log_info(
            self._log,
            "[%s] product_id=%d available_on=%s",
            DispatchEventType.NO_USERS,
            product_id,
            available_on.isoformat(),
        )

    def log_delivery_succeeded(self, *, product_id: int, user: AlertedUser) -> None:
        """Log one successful notification."""
        log_info(
            self._log,
            "[%s] product_id=%d user_id=%s",
            DispatchEventType.DELIVERY_SUCCEEDED,
            product_id,
            user.user_id,
        )

    def log_delivery_failed(
        self,
        *,
        product_id: int,
        user: AlertedUser,
        reason: str,
        error: BaseException | None = None,
    ) -> None:
        """Log one failed notification.

        ``error`` is attached as exc_info only for unexpected exceptions;
        expected delivery errors are fully described by ``reason``.
        """
        log_warning(
            self._log,
            "[%s] product_id=%d user_id=%s reason=%s",
            DispatchEventType.DELIVERY_FAILED,
            product_id,
            user.user_id,
            reason,
            exc_info=error,
        )

    def log_completed(self, outcome: DispatchOutcome) -> None:
        """Log the aggregate outcome of a dispatch."""
        failed_ids = ",".join(str(failure.user_id) for failure in outcome.users_failed)
        log_info(
            self._log,
            "[%s] product_id=%d status=%s users_resolved=%d users_notified=%d "
            "users_failed=%d failed_user_ids=%s",
            DispatchEventType.COMPLETED,
            outcome.product_id,
            outcome.status,
            outcome.users_resolved,
            outcome.users_notified,
            len(outcome.users_failed),
            failed_ids,
        )
