"""Factory for creating Notifier implementations from environment configuration."""

from __future__ import annotations

import os
import typing as typ

from stockwatch.notify.errors import NotifierConfigError
from stockwatch.notify.logging_notifier import LoggingNotifier

if typ.TYPE_CHECKING:
    from stockwatch.notify.protocol import Notifier

_DEFAULT_BACKEND = "logging"
_BACKENDS: dict[str, typ.Callable[[], Notifier]] = {
    "logging": LoggingNotifier,
}


def create_notifier() -> Notifier:
    """Create a Notifier based on ``STOCKWATCH_NOTIFIER_BACKEND``.

    The variable defaults to ``logging``. Names are matched
    case-insensitively.

    Raises
    ------
    NotifierConfigError
        If the backend name is not recognised.

    Examples
    --------
    >>> import os
    >>> os.environ["STOCKWATCH_NOTIFIER_BACKEND"] = "logging"
    >>> isinstance(create_notifier(), LoggingNotifier)
    True

    """
    raw_backend = os.environ.get("STOCKWATCH_NOTIFIER_BACKEND", _DEFAULT_BACKEND)
    backend = raw_backend.strip().lower() or _DEFAULT_BACKEND
    factory = _BACKENDS.get(backend)
    if factory is None:
        raise NotifierConfigError.invalid_backend(raw_backend, _BACKENDS)
    return factory()
