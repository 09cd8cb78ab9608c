"""Event intake: the boundary between the message transport and dispatch."""

from __future__ import annotations

import typing as typ

from stockwatch.intake.errors import MalformedEvent
from stockwatch.intake.events import decode_event
from stockwatch.intake.observability import IntakeEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stockwatch.dispatch.models import DispatchOutcome
    from stockwatch.dispatch.service import DispatchCoordinator
    from stockwatch.intake.events import EventMessage


class EventIntake:
    """Accept inbound messages and dispatch each well-formed event once.

    Malformed messages are logged and skipped so they can never block the
    messages queued behind them. Dispatch failures are already folded into
    the returned outcome by the coordinator, so nothing raised here escapes
    to the transport for ordinary bad input.

    Parameters
    ----------
    coordinator
        Dispatch coordinator invoked once per well-formed event.
    event_logger
        Optional structured event logger for rejected messages and outcomes.

    """

    def __init__(
        self,
        coordinator: DispatchCoordinator,
        event_logger: IntakeEventLogger | None = None,
    ) -> None:
        """Configure the intake with its coordinator."""
        self._coordinator = coordinator
        self._events = event_logger or IntakeEventLogger()

    @property
    def coordinator(self) -> DispatchCoordinator:
        """Return the coordinator events are dispatched to."""
        return self._coordinator

    async def handle(self, message: EventMessage) -> DispatchOutcome | None:
        """Decode and dispatch one message.

        Parameters
        ----------
        message
            JSON payload or already-decoded mapping from the transport.

        Returns
        -------
        DispatchOutcome | None
            The dispatch outcome, or ``None`` when the message was rejected
            as malformed.

        """
        try:
            event = decode_event(message)
        except MalformedEvent as exc:
            self._events.log_message_rejected(exc)
            return None

        outcome = await self._coordinator.dispatch(event)
        self._events.log_outcome(outcome)
        return outcome

    async def consume(
        self,
        messages: cabc.Iterable[EventMessage],
    ) -> list[DispatchOutcome]:
        """Handle messages in order, returning outcomes of well-formed ones."""
        outcomes: list[DispatchOutcome] = []
        for message in messages:
            outcome = await self.handle(message)
            if outcome is not None:
                outcomes.append(outcome)
        return outcomes
