"""User Directory query errors."""

from __future__ import annotations

# Body preview length for protocol error messages
_BODY_PREVIEW_LIMIT = 100


class AlertDirectoryError(RuntimeError):
    """Base class for failures while resolving alerted users.

    The dispatch coordinator catches this type to turn a failed query into a
    ``query_failed`` outcome instead of propagating it.
    """


class DirectoryUnavailable(AlertDirectoryError):
    """Raised when the User Directory cannot be reached or rejects the call.

    Attributes
    ----------
    status_code
        HTTP status code of the rejected response, if one was received.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> DirectoryUnavailable:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"User Directory HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> DirectoryUnavailable:
        """Return an error for a request that exceeded the client timeout."""
        return cls("User Directory request timed out")

    @classmethod
    def network_error(cls, detail: str) -> DirectoryUnavailable:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"User Directory network error: {detail}")


class DirectoryProtocolError(AlertDirectoryError):
    """Raised when a User Directory response cannot be parsed."""

    @classmethod
    def invalid_json(cls, body: str) -> DirectoryProtocolError:
        """Return an error for a body that is not valid JSON."""
        if len(body) > _BODY_PREVIEW_LIMIT:
            preview = body[:_BODY_PREVIEW_LIMIT] + "..."
        else:
            preview = body
        return cls(f"Failed to parse User Directory response: {preview}")

    @classmethod
    def empty_body(cls) -> DirectoryProtocolError:
        """Return an error for a successful response with no body."""
        return cls("User Directory response body is empty; expected a JSON array")

    @classmethod
    def not_a_list(cls, type_name: str) -> DirectoryProtocolError:
        """Return an error for a JSON body that is not an array."""
        return cls(f"User Directory response must be a JSON array, got {type_name}")

    @classmethod
    def invalid_record(cls, index: int, detail: str) -> DirectoryProtocolError:
        """Return an error for a user record missing required fields."""
        return cls(f"User Directory record {index} is invalid: {detail}")


class AlertDirectoryConfigError(ValueError):
    """Raised when the User Directory client configuration is invalid."""

    @classmethod
    def missing_endpoint(cls) -> AlertDirectoryConfigError:
        """Return an error when no endpoint template is configured."""
        return cls("STOCKWATCH_ALERT_QUERY_URL environment variable is required")

    @classmethod
    def missing_placeholder(
        cls, template: str, placeholder: str
    ) -> AlertDirectoryConfigError:
        """Return an error for a template lacking a required placeholder."""
        return cls(
            f"Alert query endpoint template {template!r} "
            f"must contain the {placeholder} placeholder"
        )

    @classmethod
    def invalid_timeout(cls, value: str) -> AlertDirectoryConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(
            f"Invalid alert query timeout {value!r}. "
            "Must be a positive number of seconds"
        )
