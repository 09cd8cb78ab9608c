"""Errors raised while accepting inbound messages."""

from __future__ import annotations

# Payload preview length for error messages
_PAYLOAD_PREVIEW_LIMIT = 100


class MalformedEvent(ValueError):
    """Raised when an inbound message cannot be parsed into an event.

    The intake logs and skips such messages; they never reach the dispatch
    coordinator.
    """

    @classmethod
    def undecodable(cls, payload: str, detail: str) -> MalformedEvent:
        """Return an error for a payload that failed validation or parsing."""
        if len(payload) > _PAYLOAD_PREVIEW_LIMIT:
            preview = payload[:_PAYLOAD_PREVIEW_LIMIT] + "..."
        else:
            preview = payload
        return cls(f"Malformed product-available event ({detail}): {preview}")

    @classmethod
    def unsupported_type(cls, type_name: str) -> MalformedEvent:
        """Return an error for a message of an unexpected Python type."""
        return cls(f"Unsupported product-available message type: {type_name}")
