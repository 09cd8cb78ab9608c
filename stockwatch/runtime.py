"""Stockwatch runtime: composition root and local entrypoint.

:func:`build_event_intake` wires the configured User Directory client,
notifier, and dispatch coordinator into an :class:`EventIntake`. The Dramatiq
actor uses it for queue-driven workers; :func:`main` uses it to process
newline-delimited JSON events from files or stdin.

Configuration is driven by environment variables:

- ``STOCKWATCH_ALERT_QUERY_URL``: Endpoint template (required)
- ``STOCKWATCH_ALERT_QUERY_TIMEOUT_S``: Directory request timeout
- ``STOCKWATCH_TIMEZONE``: Processing timezone (default ``UTC``)
- ``STOCKWATCH_MAX_CONCURRENT_NOTIFICATIONS``: Fan-out bound (default 1)
- ``STOCKWATCH_NOTIFIER_BACKEND``: Notifier backend (default ``logging``)
- ``STOCKWATCH_LOG_LEVEL``: Log level (default ``INFO``)

Run with ``python -m stockwatch.runtime events.jsonl`` or pipe events in:
``echo '{"productId": 42}' | python -m stockwatch.runtime``.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import typing as typ
from pathlib import Path

from stockwatch.alerts import AlertDirectoryConfig, HttpAlertQueryClient
from stockwatch.dispatch import DispatchConfig, DispatchCoordinator
from stockwatch.intake import EventIntake
from stockwatch.logging import configure_logging, get_logger, log_info, log_warning
from stockwatch.notify import create_notifier

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stockwatch.dispatch import DispatchOutcome

logger = get_logger(__name__)


def build_event_intake(
    *,
    alert_config: AlertDirectoryConfig | None = None,
    dispatch_config: DispatchConfig | None = None,
) -> EventIntake:
    """Build an event intake from explicit or environment configuration.

    Parameters
    ----------
    alert_config
        User Directory configuration; read from the environment when omitted.
    dispatch_config
        Dispatch configuration; read from the environment when omitted.

    Returns
    -------
    EventIntake
        Intake backed by one long-lived ``HttpAlertQueryClient``.

    Raises
    ------
    AlertDirectoryConfigError
        If the directory configuration is missing or invalid.
    DispatchConfigError
        If the dispatch configuration is invalid.
    NotifierConfigError
        If the notifier backend is unknown.

    """
    alert_client = HttpAlertQueryClient(alert_config or AlertDirectoryConfig.from_env())
    coordinator = DispatchCoordinator(
        alert_client,
        create_notifier(),
        dispatch_config or DispatchConfig.from_env(),
    )
    return EventIntake(coordinator)


def _iter_lines(sources: cabc.Sequence[Path]) -> cabc.Iterator[str]:
    if not sources:
        yield from (line for line in sys.stdin if line.strip())
        return
    for source in sources:
        with source.open(encoding="utf-8") as handle:
            yield from (line for line in handle if line.strip())


async def close_event_intake(intake: EventIntake) -> None:
    """Release the HTTP resources held by an intake built here."""
    client = intake.coordinator.alert_client
    if isinstance(client, HttpAlertQueryClient):
        await client.aclose()


async def _consume_and_close(
    intake: EventIntake,
    lines: cabc.Iterable[str],
) -> list[DispatchOutcome]:
    try:
        return await intake.consume(lines)
    finally:
        await close_event_intake(intake)


def main(argv: list[str] | None = None) -> int:
    """Dispatch newline-delimited JSON events from files or stdin.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 when every well-formed event was fully delivered,
        1 when any dispatch reported a failure.

    """
    parser = argparse.ArgumentParser(description="Dispatch product-available events")
    parser.add_argument(
        "events",
        nargs="*",
        type=Path,
        help="Files of newline-delimited JSON events (default: stdin)",
    )
    args = parser.parse_args(argv)

    log_level_str = os.environ.get("STOCKWATCH_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid STOCKWATCH_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    intake = build_event_intake()
    outcomes = asyncio.run(_consume_and_close(intake, _iter_lines(args.events)))
    failed = sum(1 for outcome in outcomes if not outcome.succeeded)
    log_info(
        logger,
        "Processed %d event(s), %d with failures",
        len(outcomes),
        failed,
    )
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
