"""Pushwoosh client package.

Builds push notifications and creates them through the Pushwoosh
``createMessage`` API, batching every message queued within one unit of work
into a single request.

Public API:
    - PushwooshMessage: Fluent builder for a single notification
    - PushwooshClient: Credentials plus the createMessage call
    - PendingMessage: Batch of messages flushed with one API call
    - PushwooshChannel: Adapter turning notifications into Pushwoosh messages
    - PushwooshSettings: Connection settings, see ``load_settings``/``settings_from_env``
"""

from __future__ import annotations

# Core types
from .client import API_ENDPOINT, CODE_NOT_AVAILABLE, PushwooshClient
from .errors import (
    ApiError,
    BatchClosedError,
    CommunicationError,
    PushwooshError,
    UnknownDeviceError,
)
from .message import PushwooshMessage
from .pending import PendingMessage

# Integration and configuration
from .channel import PushwooshChannel
from .config import PushwooshSettings, build_client, load_settings, settings_from_env
from .detection import caused_by_server_error

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "API_ENDPOINT",
    "CODE_NOT_AVAILABLE",
    # Core types
    "PushwooshMessage",
    "PushwooshClient",
    "PendingMessage",
    # Errors
    "PushwooshError",
    "CommunicationError",
    "ApiError",
    "UnknownDeviceError",
    "BatchClosedError",
    # Integration
    "PushwooshChannel",
    "caused_by_server_error",
    # Configuration
    "PushwooshSettings",
    "build_client",
    "load_settings",
    "settings_from_env",
]
