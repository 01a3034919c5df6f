from __future__ import annotations

from typing import Any, Optional


class PushwooshError(RuntimeError):
    """Raised when a batch of messages could not be created in Pushwoosh."""


class CommunicationError(PushwooshError):
    """Raised when the Pushwoosh API could not be reached.

    The transport failure that caused it is available as ``__cause__``.
    """


class ApiError(PushwooshError):
    """Raised when Pushwoosh answers with a non-200 status code."""

    def __init__(self, status_message: str, status_code: Optional[int] = None) -> None:
        super().__init__(status_message)
        self.status_message = status_message
        self.status_code = status_code


class UnknownDeviceError(PushwooshError):
    """Raised when Pushwoosh flags one or more recipient devices as unknown."""

    def __init__(self, devices: Any) -> None:
        super().__init__(f"Pushwoosh reported unknown devices: {devices}")
        self.devices = devices


class BatchClosedError(RuntimeError):
    """Raised when a message is queued into a batch that was already flushed."""
