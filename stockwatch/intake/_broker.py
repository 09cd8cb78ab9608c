"""Broker configuration helpers for Dramatiq actor setup.

``dramatiq.actor`` binds to the global broker when the decorator runs, so
:mod:`stockwatch.intake.actor` installs the broker at import time, before
declaring its actor.
"""

from __future__ import annotations

import os
import sys
import threading

import dramatiq
from dramatiq.brokers.stub import StubBroker

_BROKER_LOCK = threading.Lock()
_broker_configured = False


def _is_running_tests() -> bool:
    """Return True when pytest (or pytest-xdist) drives the process."""
    return "pytest" in sys.modules or any(
        key in os.environ
        for key in ["PYTEST_CURRENT_TEST", "PYTEST_XDIST_WORKER", "PYTEST_ADDOPTS"]
    )


def _should_use_stub_broker() -> bool:
    allow_stub = os.environ.get("STOCKWATCH_ALLOW_STUB_BROKER", "")
    return allow_stub.lower() in {"1", "true", "yes"} or _is_running_tests()


def _build_broker() -> dramatiq.Broker:
    """Choose the broker from the environment.

    ``STOCKWATCH_BROKER_URL`` selects a Redis (or Valkey) broker. Without it
    a StubBroker is used only under tests or when
    ``STOCKWATCH_ALLOW_STUB_BROKER`` is truthy; Dramatiq's own default
    broker is never picked up implicitly.

    Raises
    ------
    RuntimeError
        If no broker URL is set and a StubBroker is not allowed.

    """
    url = os.environ.get("STOCKWATCH_BROKER_URL", "").strip()
    if url:
        from dramatiq.brokers.redis import RedisBroker

        return RedisBroker(url=url)
    if _should_use_stub_broker():
        return StubBroker()
    message = (
        "No Dramatiq broker configured. Set STOCKWATCH_BROKER_URL to a "
        "Redis or Valkey URL, or STOCKWATCH_ALLOW_STUB_BROKER=1 for local runs."
    )
    raise RuntimeError(message)


def ensure_broker_configured() -> None:
    """Install the configured broker as Dramatiq's global broker.

    Idempotent and thread-safe across Dramatiq worker threads.

    Raises
    ------
    RuntimeError
        If no broker URL is set and a StubBroker is not allowed.

    """
    global _broker_configured

    if _broker_configured:
        return

    with _BROKER_LOCK:
        if _broker_configured:
            return

        dramatiq.set_broker(_build_broker())
        _broker_configured = True
