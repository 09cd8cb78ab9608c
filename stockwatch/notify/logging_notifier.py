"""Notifier that records delivery intent as a structured log entry."""

from __future__ import annotations

import typing as typ

from stockwatch.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from stockwatch.alerts.models import AlertedUser
    from stockwatch.logging import SupportsLog

logger = get_logger(__name__)

NOTIFICATION_LOGGED = "notify.delivery.logged"


class LoggingNotifier:
    """Stand-in for a real channel: logs who would have been notified."""

    def __init__(self, *, log: SupportsLog | None = None) -> None:
        """Initialise with an optional logger override."""
        self._log = log or logger

    async def notify(self, user: AlertedUser, product_id: int) -> None:
        """Log the notification for ``user`` about ``product_id``."""
        log_info(
            self._log,
            "[%s] user_id=%s full_name=%s product_id=%d",
            NOTIFICATION_LOGGED,
            user.user_id,
            user.full_name,
            product_id,
        )
