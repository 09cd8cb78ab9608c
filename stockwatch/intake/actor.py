"""Dramatiq actor that feeds product-available messages into the intake.

Run workers with ``dramatiq stockwatch.intake.actor``. Set
``STOCKWATCH_BROKER_URL`` to a Redis or Valkey URL to consume from a real
queue; tests and local runs fall back to a StubBroker.

Usage
-----
Publish an event from a producer:

>>> publish_product_available(42)
>>> publish_product_available(42, available_on=dt.date(2024, 5, 1))

"""

from __future__ import annotations

import asyncio
import threading
import typing as typ

import dramatiq
import msgspec

from stockwatch.intake._broker import ensure_broker_configured

if typ.TYPE_CHECKING:
    import datetime as dt

    from stockwatch.intake.consumer import EventIntake

QUEUE_NAME = "product_available"


class _WorkerState(threading.local):
    """Per worker-thread event loop and intake.

    The intake's HTTP client binds to the loop it first runs on, so each
    thread keeps one long-lived loop instead of calling ``asyncio.run``.
    """

    runner: asyncio.Runner | None = None
    intake: EventIntake | None = None


_STATE = _WorkerState()


def _intake_for_thread() -> tuple[asyncio.Runner, EventIntake]:
    if _STATE.runner is None or _STATE.intake is None:
        from stockwatch.runtime import build_event_intake

        _STATE.intake = build_event_intake()
        _STATE.runner = asyncio.Runner()
    return _STATE.runner, _STATE.intake


def _close_thread_state() -> None:
    """Close the calling thread's intake and event loop, if it built them."""
    runner, intake = _STATE.runner, _STATE.intake
    _STATE.runner = None
    _STATE.intake = None
    if runner is None:
        return
    try:
        if intake is not None:
            from stockwatch.runtime import close_event_intake

            runner.run(close_event_intake(intake))
    finally:
        runner.close()


class WorkerStateCleanup(dramatiq.Middleware):
    """Release per-thread intake resources when a worker thread stops.

    Dramatiq emits ``before_worker_thread_shutdown`` on the stopping thread
    itself, so the thread-local state closed here is that thread's own.
    """

    def before_worker_thread_shutdown(
        self, broker: dramatiq.Broker, thread: threading.Thread
    ) -> None:
        """Close the HTTP client and event loop of the stopping thread."""
        del broker, thread
        _close_thread_state()


ensure_broker_configured()
dramatiq.get_broker().add_middleware(WorkerStateCleanup())


@dramatiq.actor(queue_name=QUEUE_NAME)
def product_available_job(payload: dict[str, object]) -> dict[str, object] | None:
    """Dramatiq actor handling one product-available message.

    Parameters
    ----------
    payload
        Event mapping, e.g. ``{"productId": 42, "availableOn": "2024-05-01"}``.

    Returns
    -------
    dict[str, object] | None
        The dispatch outcome as JSON-compatible builtins, or ``None`` when
        the payload was rejected as malformed. Neither case raises, so the
        broker does not redeliver.

    """
    runner, intake = _intake_for_thread()
    outcome = runner.run(intake.handle(payload))
    if outcome is None:
        return None
    # JSON round trip: tuples become lists, as a result backend stores them
    return msgspec.json.decode(msgspec.json.encode(outcome))


def publish_product_available(
    product_id: int,
    *,
    available_on: dt.date | None = None,
) -> dramatiq.Message:
    """Enqueue a product-available event for the workers."""
    payload: dict[str, object] = {"productId": product_id}
    if available_on is not None:
        payload["availableOn"] = available_on.isoformat()
    return product_available_job.send(payload)
