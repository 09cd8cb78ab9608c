"""Outcome structures produced by the dispatch coordinator."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import enum

import msgspec

from stockwatch.alerts.models import UserId  # noqa: TC001


class DispatchStatus(enum.StrEnum):
    """How far a dispatch got before it finished."""

    COMPLETED = "completed"
    NO_USERS = "no_users"
    QUERY_FAILED = "query_failed"


class UserFailure(msgspec.Struct, kw_only=True, frozen=True):
    """A user whose notification could not be delivered."""

    user_id: UserId
    reason: str


class DispatchOutcome(msgspec.Struct, kw_only=True, frozen=True):
    """Aggregate result of dispatching one product-available event.

    ``users_notified + len(users_failed)`` always equals the number of users
    the directory returned. A ``QUERY_FAILED`` outcome reports zero of both
    and carries the query error message instead.

    Attributes
    ----------
    product_id
        Product the event was about.
    available_on
        Date used for the directory query.
    status
        Completed, no interested users, or directory query failure.
    users_notified
        Count of successful deliveries.
    users_failed
        Failed deliveries in directory order.
    query_error
        Description of the directory failure for ``QUERY_FAILED`` outcomes.

    """

    product_id: int
    available_on: dt.date
    status: DispatchStatus
    users_notified: int = 0
    users_failed: tuple[UserFailure, ...] = ()
    query_error: str | None = None

    @property
    def users_resolved(self) -> int:
        """Return how many users the directory returned."""
        return self.users_notified + len(self.users_failed)

    @property
    def succeeded(self) -> bool:
        """Return whether every resolved user was notified."""
        return self.status is not DispatchStatus.QUERY_FAILED and not self.users_failed
