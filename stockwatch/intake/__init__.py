"""Inbound product-available events and the intake boundary.

The Dramatiq transport adapter lives in :mod:`stockwatch.intake.actor` and is
not imported here, so importing the package never touches broker state.
"""

from __future__ import annotations

from stockwatch.intake.consumer import EventIntake
from stockwatch.intake.errors import MalformedEvent
from stockwatch.intake.events import ProductAvailableEvent, decode_event
from stockwatch.intake.observability import IntakeEventLogger, IntakeEventType

__all__ = [
    "EventIntake",
    "IntakeEventLogger",
    "IntakeEventType",
    "MalformedEvent",
    "ProductAvailableEvent",
    "decode_event",
]
