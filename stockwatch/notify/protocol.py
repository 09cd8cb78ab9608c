"""Notifier protocol for delivering product availability notices."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from stockwatch.alerts.models import AlertedUser


@typ.runtime_checkable
class Notifier(typ.Protocol):
    """Protocol for delivering one notification to one user.

    Implementations (log-only today, email, SMS or push later) are
    interchangeable: the dispatch coordinator only relies on this method.
    They must not mutate shared state beyond the delivery itself, so a
    caller may retry a delivery and share one instance across dispatches.

    Examples
    --------
    >>> from stockwatch.notify import LoggingNotifier, Notifier
    >>> isinstance(LoggingNotifier(), Notifier)
    True

    """

    async def notify(self, user: AlertedUser, product_id: int) -> None:
        """Tell ``user`` that ``product_id`` is available.

        Returning normally means the notification was delivered.

        Raises
        ------
        NotifierDeliveryError
            If delivery failed; the reason is recorded against the user.

        """
        ...
