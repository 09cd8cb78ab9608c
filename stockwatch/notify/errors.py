"""Notification delivery errors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class NotifierError(Exception):
    """Base class for notifier failures."""


class NotifierDeliveryError(NotifierError):
    """Raised when a single notification could not be delivered.

    Attributes
    ----------
    reason
        Short operator-facing explanation, copied into the dispatch outcome.

    """

    def __init__(self, reason: str) -> None:
        """Initialise with the failure reason."""
        self.reason = reason
        super().__init__(reason)


class NotifierConfigError(NotifierError):
    """Raised when the notifier backend configuration is invalid."""

    @classmethod
    def invalid_backend(
        cls, name: str, valid_backends: cabc.Iterable[str]
    ) -> NotifierConfigError:
        """Return an error listing the supported backend names."""
        valid_backends_str = ", ".join(f"'{b}'" for b in sorted(valid_backends))
        return cls(
            f"Invalid notifier backend '{name}'. "
            f"Valid options are: {valid_backends_str}"
        )
