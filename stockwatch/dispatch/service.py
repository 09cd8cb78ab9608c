"""Dispatch coordinator for product-available notifications.

This module provides the DispatchCoordinator which orchestrates one event:
resolving the interested users through the User Directory, notifying each of
them, and aggregating the result into a DispatchOutcome.

Usage
-----
>>> from stockwatch.alerts import AlertDirectoryConfig, HttpAlertQueryClient
>>> from stockwatch.notify import LoggingNotifier
>>> from stockwatch.dispatch import DispatchCoordinator
>>>
>>> client = HttpAlertQueryClient(
...     AlertDirectoryConfig(
...         "http://users/alerts/{productId}?date={availableOnDate}"
...     )
... )
>>> coordinator = DispatchCoordinator(client, LoggingNotifier())
>>> outcome = await coordinator.dispatch(ProductAvailableEvent(product_id=42))

"""

from __future__ import annotations

import asyncio
import typing as typ

from stockwatch.alerts.errors import AlertDirectoryError
from stockwatch.alerts.models import AlertQuery
from stockwatch.common.time import processing_date
from stockwatch.notify.errors import NotifierDeliveryError

from .config import DispatchConfig
from .models import DispatchOutcome, DispatchStatus, UserFailure
from .observability import DispatchEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from stockwatch.alerts.client import AlertQueryClient
    from stockwatch.alerts.models import AlertedUser
    from stockwatch.intake.events import ProductAvailableEvent
    from stockwatch.notify.protocol import Notifier


class DispatchCoordinator:
    """Turn one product-available event into per-user notifications.

    The workflow is:

    1. Build an AlertQuery, defaulting the date to today in the configured
       timezone
    2. Resolve the interested users; a directory failure ends the dispatch
       with a ``QUERY_FAILED`` outcome
    3. Return a ``NO_USERS`` outcome when nobody is interested
    4. Notify every user in directory order, recording each failure without
       stopping
    5. Return the aggregate ``COMPLETED`` outcome

    The coordinator holds no per-dispatch state, so one instance can serve
    concurrent dispatches.
    """

    def __init__(
        self,
        alert_client: AlertQueryClient,
        notifier: Notifier,
        config: DispatchConfig | None = None,
        event_logger: DispatchEventLogger | None = None,
        *,
        today: cabc.Callable[[str], dt.date] = processing_date,
    ) -> None:
        """Configure the coordinator with its collaborators.

        Parameters
        ----------
        alert_client
            Long-lived client used to resolve alerted users.
        notifier
            Delivery mechanism for individual notifications.
        config
            Optional dispatch configuration; uses defaults if not provided.
        event_logger
            Optional structured event logger; a default one is created when
            omitted.
        today
            Callable returning the current date for a timezone name.

        """
        self._alert_client = alert_client
        self._notifier = notifier
        self._config = config or DispatchConfig()
        self._events = event_logger or DispatchEventLogger()
        self._today = today

    @property
    def config(self) -> DispatchConfig:
        """Read-only access to the dispatch configuration."""
        return self._config

    @property
    def alert_client(self) -> AlertQueryClient:
        """Return the injected User Directory client."""
        return self._alert_client

    async def dispatch(self, event: ProductAvailableEvent) -> DispatchOutcome:
        """Notify every user alerting on the event's product and date.

        Directory and delivery failures are reported in the returned outcome
        and never raised.

        Parameters
        ----------
        event
            The product-available event to dispatch.

        Returns
        -------
        DispatchOutcome
            Counts of notified users, the failed users with reasons, and the
            overall status.

        """
        query = AlertQuery.from_event(event, self._today(self._config.timezone))
        self._events.log_event_received(
            product_id=query.product_id, available_on=query.available_on
        )

        try:
            users = await self._alert_client.resolve(query)
        except AlertDirectoryError as exc:
            self._events.log_query_failed(product_id=query.product_id, error=exc)
            return self._finish(
                query, status=DispatchStatus.QUERY_FAILED, query_error=str(exc)
            )
        except Exception as exc:  # noqa: BLE001 - pluggable clients may raise anything
            self._events.log_query_failed(product_id=query.product_id, error=exc)
            return self._finish(
                query,
                status=DispatchStatus.QUERY_FAILED,
                query_error=f"{type(exc).__name__}: {exc}",
            )

        if not users:
            self._events.log_no_users(
                product_id=query.product_id, available_on=query.available_on
            )
            return self._finish(query, status=DispatchStatus.NO_USERS)

        results = await self._notify_all(users, query.product_id)
        failures = tuple(result for result in results if result is not None)
        return self._finish(
            query,
            status=DispatchStatus.COMPLETED,
            users_notified=len(results) - len(failures),
            users_failed=failures,
        )

    def _finish(
        self,
        query: AlertQuery,
        *,
        status: DispatchStatus,
        users_notified: int = 0,
        users_failed: tuple[UserFailure, ...] = (),
        query_error: str | None = None,
    ) -> DispatchOutcome:
        outcome = DispatchOutcome(
            product_id=query.product_id,
            available_on=query.available_on,
            status=status,
            users_notified=users_notified,
            users_failed=users_failed,
            query_error=query_error,
        )
        self._events.log_completed(outcome)
        return outcome

    async def _notify_all(
        self,
        users: cabc.Sequence[AlertedUser],
        product_id: int,
    ) -> list[UserFailure | None]:
        """Notify users in order, returning ``None`` for each success."""
        limit = self._config.max_concurrent_notifications
        if limit == 1:
            return [await self._notify_one(user, product_id) for user in users]

        semaphore = asyncio.Semaphore(limit)

        async def bounded_notify(user: AlertedUser) -> UserFailure | None:
            async with semaphore:
                return await self._notify_one(user, product_id)

        # gather keeps results in argument order
        return list(await asyncio.gather(*(bounded_notify(user) for user in users)))

    async def _notify_one(
        self,
        user: AlertedUser,
        product_id: int,
    ) -> UserFailure | None:
        """Attempt one delivery; failures are returned, never raised."""
        try:
            await self._notifier.notify(user, product_id)
        except NotifierDeliveryError as exc:
            self._events.log_delivery_failed(
                product_id=product_id, user=user, reason=exc.reason
            )
            return UserFailure(user_id=user.user_id, reason=exc.reason)
        except Exception as exc:  # noqa: BLE001 - one user's failure must not abort siblings
            reason = f"{type(exc).__name__}: {exc}"
            self._events.log_delivery_failed(
                product_id=product_id, user=user, reason=reason, error=exc
            )
            return UserFailure(user_id=user.user_id, reason=reason)

        self._events.log_delivery_succeeded(product_id=product_id, user=user)
        return None
