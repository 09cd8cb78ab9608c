"""Request and result structures for User Directory alert queries."""

from __future__ import annotations

import datetime as dt  # noqa: TC003
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    from stockwatch.intake.events import ProductAvailableEvent

type UserId = int | str


class AlertQuery(msgspec.Struct, kw_only=True, frozen=True):
    """Lookup key for users alerting on a product becoming available.

    Attributes
    ----------
    product_id
        Positive product identifier.
    available_on
        Calendar date the product became available.

    """

    product_id: int
    available_on: dt.date

    def __post_init__(self) -> None:
        """Reject identifiers the directory could never match."""
        if isinstance(self.product_id, bool) or self.product_id < 1:
            msg = f"product_id must be a positive integer, got {self.product_id!r}"
            raise ValueError(msg)

    @classmethod
    def from_event(
        cls,
        event: ProductAvailableEvent,
        default_date: dt.date,
    ) -> AlertQuery:
        """Derive a query from an event, filling in the processing date."""
        return cls(
            product_id=event.product_id,
            available_on=event.available_on or default_date,
        )


class AlertedUser(msgspec.Struct, kw_only=True, frozen=True):
    """A user whose alert matched an availability query.

    ``contact`` carries every other field the directory returned (email,
    phone number, and so on); the dispatcher passes it through untouched.
    """

    user_id: UserId
    full_name: str
    contact: typ.Mapping[str, object] = msgspec.field(default_factory=dict)
