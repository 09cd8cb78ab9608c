"""Inbound "product available" event structure and decoding."""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt  # noqa: TC003
import typing as typ

import msgspec

from stockwatch.intake.errors import MalformedEvent

PositiveInt = typ.Annotated[int, msgspec.Meta(gt=0)]


class ProductAvailableEvent(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """A product became available.

    On the wire the fields are camelCase, for example
    ``{"productId": 42, "availableOn": "2024-05-01"}``. ``availableOn`` may be
    omitted, in which case the processing date is used.

    Attributes
    ----------
    product_id
        Positive product identifier.
    available_on
        Date the product became available, if the producer supplied one.

    """

    product_id: PositiveInt
    available_on: dt.date | None = None


type EventMessage = bytes | bytearray | str | cabc.Mapping[str, object]


def decode_event(message: EventMessage) -> ProductAvailableEvent:
    """Parse a JSON document or decoded mapping into an event.

    Parameters
    ----------
    message
        Raw JSON (``bytes`` or ``str``) as read from a queue, or the mapping
        a transport has already deserialised.

    Returns
    -------
    ProductAvailableEvent
        The validated event.

    Raises
    ------
    MalformedEvent
        If the message is not valid JSON, lacks a positive integer
        ``productId``, or carries an invalid ``availableOn`` date.

    """
    try:
        if isinstance(message, bytes | bytearray | str):
            return msgspec.json.decode(message, type=ProductAvailableEvent)
        if isinstance(message, cabc.Mapping):
            return msgspec.convert(dict(message), type=ProductAvailableEvent)
    except msgspec.DecodeError as exc:
        # ValidationError subclasses DecodeError
        raise MalformedEvent.undecodable(_preview(message), str(exc)) from exc
    raise MalformedEvent.unsupported_type(type(message).__name__)


def _preview(message: EventMessage) -> str:
    if isinstance(message, bytes | bytearray):
        return bytes(message).decode("utf-8", errors="replace")
    return str(message)
