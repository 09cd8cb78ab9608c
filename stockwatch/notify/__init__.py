"""Notification delivery behind a pluggable Notifier protocol."""

from __future__ import annotations

from stockwatch.notify.errors import (
    NotifierConfigError,
    NotifierDeliveryError,
    NotifierError,
)
from stockwatch.notify.factory import create_notifier
from stockwatch.notify.logging_notifier import LoggingNotifier
from stockwatch.notify.protocol import Notifier

__all__ = [
    "LoggingNotifier",
    "Notifier",
    "NotifierConfigError",
    "NotifierDeliveryError",
    "NotifierError",
    "create_notifier",
]
