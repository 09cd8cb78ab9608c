"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import pytest

from stockwatch.alerts.models import AlertedUser
from stockwatch.dispatch import DispatchEventLogger
from tests.helpers.fakes import RecordingLogger


@pytest.fixture
def alice() -> AlertedUser:
    """Provide the first alerted user."""
    return AlertedUser(
        user_id=1, full_name="Alice", contact={"email": "alice@example.com"}
    )


@pytest.fixture
def bob() -> AlertedUser:
    """Provide the second alerted user."""
    return AlertedUser(user_id=2, full_name="Bob", contact={"email": "bob@example.com"})


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records every call."""
    return RecordingLogger()


@pytest.fixture
def dispatch_event_logger(recording_logger: RecordingLogger) -> DispatchEventLogger:
    """Provide a dispatch event logger writing to the recording logger."""
    return DispatchEventLogger(log=recording_logger)
