from __future__ import annotations

import logging
from typing import Any, List, Optional

from .client import PushwooshClient
from .errors import PushwooshError, UnknownDeviceError
from .message import PushwooshMessage

LOGGER = logging.getLogger(__name__)


class PushwooshChannel:
    """Delivers notifications through Pushwoosh.

    A notification takes part by implementing ``to_pushwoosh(notifiable)``,
    returning a :class:`PushwooshMessage` or ``None`` when there is nothing to
    push. The message is associated with the notification so its ``id`` becomes
    the transaction id, unless the message already carries an identifier.
    """

    name = "pushwoosh"

    def __init__(self, client: PushwooshClient) -> None:
        self._client = client

    def send(self, notifiable: Any, notification: Any) -> List[Optional[str]]:
        to_pushwoosh = getattr(notification, "to_pushwoosh", None)
        if not callable(to_pushwoosh):
            raise TypeError(f"{type(notification).__name__} does not implement to_pushwoosh()")

        message: Optional[PushwooshMessage] = to_pushwoosh(notifiable)
        if message is None:
            LOGGER.debug("Notification %s produced no Pushwoosh message", getattr(notification, "id", None))
            return []

        message.associate(notification)
        try:
            with self._client.send(message) as pending:
                pass
        except UnknownDeviceError as exc:
            LOGGER.warning("Pushwoosh rejected unknown devices: %s", exc.devices)
            raise
        except PushwooshError:
            LOGGER.exception("Failed to deliver notification %s through Pushwoosh", getattr(notification, "id", None))
            raise

        return pending.identifiers
