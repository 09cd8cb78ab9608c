"""Dispatch of product-available events to interested users.

Public API
----------
DispatchCoordinator
    Resolves interested users and notifies each of them.
DispatchConfig
    Processing timezone and fan-out bound.
DispatchOutcome
    Aggregate result of one dispatch.
DispatchStatus
    Completed, no users, or query failed.
UserFailure
    A user whose notification failed, with the reason.
DispatchEventLogger
    Structured log events for each dispatch step.

"""

from __future__ import annotations

from stockwatch.dispatch.config import DispatchConfig, DispatchConfigError
from stockwatch.dispatch.models import DispatchOutcome, DispatchStatus, UserFailure
from stockwatch.dispatch.observability import (
    DispatchEventLogger,
    DispatchEventType,
    ErrorCategory,
    categorize_error,
)
from stockwatch.dispatch.service import DispatchCoordinator

__all__ = [
    "DispatchConfig",
    "DispatchConfigError",
    "DispatchCoordinator",
    "DispatchEventLogger",
    "DispatchEventType",
    "DispatchOutcome",
    "DispatchStatus",
    "ErrorCategory",
    "UserFailure",
    "categorize_error",
]
