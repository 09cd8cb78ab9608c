"""Configuration for the dispatch coordinator.

Usage
-----
Create a configuration with defaults:

>>> config = DispatchConfig()
>>> config.max_concurrent_notifications
1

Or load from environment variables:

>>> import os
>>> os.environ["STOCKWATCH_TIMEZONE"] = "Europe/Madrid"
>>> DispatchConfig.from_env().timezone
'Europe/Madrid'

"""

from __future__ import annotations

import dataclasses as dc
import os
import zoneinfo


class DispatchConfigError(ValueError):
    """Raised when dispatch configuration values are invalid."""


@dc.dataclass(frozen=True, slots=True)
class DispatchConfig:
    """Runtime knobs for dispatching notifications.

    Attributes
    ----------
    timezone
        IANA timezone whose current date is used when an event carries no
        ``availableOn`` date. Default is ``UTC``.
    max_concurrent_notifications
        Upper bound on notifier calls in flight for one event. The default
        of 1 notifies users strictly one after another.

    """

    timezone: str = "UTC"
    max_concurrent_notifications: int = 1

    def __post_init__(self) -> None:
        """Validate the timezone name and concurrency bound."""
        try:
            zoneinfo.ZoneInfo(self.timezone)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown timezone: {self.timezone!r}"
            raise DispatchConfigError(msg) from exc
        if self.max_concurrent_notifications < 1:
            msg = (
                "max_concurrent_notifications must be positive, "
                f"got: {self.max_concurrent_notifications}"
            )
            raise DispatchConfigError(msg)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        """Read a positive integer env var, falling back to a default."""
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise DispatchConfigError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise DispatchConfigError(msg)
        return value

    @classmethod
    def from_env(cls) -> DispatchConfig:
        """Create configuration from environment variables.

        Reads the following environment variables:

        - ``STOCKWATCH_TIMEZONE``: Processing timezone (default ``UTC``).
        - ``STOCKWATCH_MAX_CONCURRENT_NOTIFICATIONS``: Positive integer
          bound on concurrent deliveries per event (default 1).

        Raises
        ------
        DispatchConfigError
            If either value is invalid.

        """
        timezone = os.environ.get("STOCKWATCH_TIMEZONE", "").strip() or "UTC"
        max_concurrent = cls._parse_positive_int(
            "STOCKWATCH_MAX_CONCURRENT_NOTIFICATIONS", 1
        )
        return cls(timezone=timezone, max_concurrent_notifications=max_concurrent)
