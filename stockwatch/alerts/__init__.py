"""User Directory lookups for product availability alerts.

Public API
----------
AlertQuery
    Product and date pair sent to the directory.
AlertedUser
    A user whose alert matched the query.
AlertQueryClient
    Protocol implemented by directory clients.
HttpAlertQueryClient
    httpx-backed implementation.
AlertDirectoryConfig
    Endpoint template and timeout.
AlertDirectoryError
    Base class for query failures.
DirectoryUnavailable
    The directory could not be reached or returned an HTTP error.
DirectoryProtocolError
    The directory response could not be parsed.

"""

from __future__ import annotations

from stockwatch.alerts.client import (
    AlertQueryClient,
    HttpAlertQueryClient,
    parse_alerted_users,
)
from stockwatch.alerts.config import AlertDirectoryConfig
from stockwatch.alerts.errors import (
    AlertDirectoryConfigError,
    AlertDirectoryError,
    DirectoryProtocolError,
    DirectoryUnavailable,
)
from stockwatch.alerts.models import AlertedUser, AlertQuery

__all__ = [
    "AlertDirectoryConfig",
    "AlertDirectoryConfigError",
    "AlertDirectoryError",
    "AlertQuery",
    "AlertQueryClient",
    "AlertedUser",
    "DirectoryProtocolError",
    "DirectoryUnavailable",
    "HttpAlertQueryClient",
    "parse_alerted_users",
]
