from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING, List, Optional, Tuple, Type

from .errors import BatchClosedError
from .message import PushwooshMessage

if TYPE_CHECKING:
    from .client import PushwooshClient

LOGGER = logging.getLogger(__name__)


class PendingMessage:
    """Messages waiting to be created in Pushwoosh with a single API call.

    The batch is flushed exactly once, either explicitly through :meth:`flush`
    or when the ``with`` block it is used in ends::

        with client.send(first) as pending:
            pending.queue(second)

        first.sent, second.sent  # True, True

    An empty batch never reaches the API. The batch is flushed even when the
    ``with`` block raises; the block's exception still propagates.
    """

    def __init__(self, client: PushwooshClient) -> None:
        self._client = client
        self._messages: List[PushwooshMessage] = []
        self._identifiers: List[Optional[str]] = []
        self._flushed = False

    def __enter__(self) -> PendingMessage:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.flush()

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def client(self) -> PushwooshClient:
        return self._client

    @property
    def messages(self) -> Tuple[PushwooshMessage, ...]:
        return tuple(self._messages)

    @property
    def identifiers(self) -> List[Optional[str]]:
        """Message codes returned by Pushwoosh, in queue order."""
        return list(self._identifiers)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def queue(self, message: PushwooshMessage) -> PendingMessage:
        if self._flushed:
            raise BatchClosedError("Cannot queue a message into a batch that was already flushed")
        self._messages.append(message)
        return self

    def mark_sent(self) -> None:
        """Mark every queued message as sent."""
        for message in self._messages:
            message._mark_sent()

    def flush(self) -> List[Optional[str]]:
        """Create the queued messages in Pushwoosh, unless that already happened.

        Returns the message codes assigned by Pushwoosh, positionally aligned
        with the queued messages. Failures of the API call propagate.
        """
        if self._flushed:
            return self.identifiers
        self._flushed = True

        if not self._messages:
            LOGGER.debug("Nothing queued, skipping Pushwoosh createMessage call")
            return []

        identifiers = self._client.create_message(self)
        for message, code in zip(self._messages, identifiers):
            message._assign_code(code)
        self._identifiers = list(identifiers)
        return self.identifiers

    close = flush
