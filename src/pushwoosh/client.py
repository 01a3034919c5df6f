from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from .detection import ErrorClassifier, caused_by_server_error
from .errors import ApiError, CommunicationError, UnknownDeviceError
from .message import PushwooshMessage
from .pending import PendingMessage

LOGGER = logging.getLogger(__name__)

API_ENDPOINT = "https://cp.pushwoosh.com/json/1.3/createMessage"
DEFAULT_TIMEOUT = 15.0

# Pushwoosh does not assign codes to messages sent to less than 10 unique devices
CODE_NOT_AVAILABLE = "CODE_NOT_AVAILABLE"


def _parse_json_response(response: requests.Response) -> Dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        snippet = (response.text or "")[:200]
        raise CommunicationError(
            f"Failed to parse Pushwoosh response as JSON ({response.status_code}): {snippet}"
        ) from exc
    if not isinstance(payload, dict):
        raise CommunicationError(f"Unexpected Pushwoosh response: {payload!r}")
    return payload


class PushwooshClient:
    """Client for the Pushwoosh createMessage endpoint.

    The client only holds credentials and the HTTP session; batching happens in
    :class:`PendingMessage`. A failed request is retried once when
    ``error_classifier`` says the Pushwoosh servers were at fault.
    """

    def __init__(
        self,
        application: str,
        token: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        endpoint: str = API_ENDPOINT,
        error_classifier: ErrorClassifier = caused_by_server_error,
    ) -> None:
        self._application = application
        self._token = token
        self.session = session or requests.Session()
        self.timeout = timeout
        self.endpoint = endpoint
        self._error_classifier = error_classifier

    def __repr__(self) -> str:
        return f"PushwooshClient(application={self._application!r}, endpoint={self.endpoint!r})"

    @property
    def application(self) -> str:
        return self._application

    @property
    def token(self) -> str:
        return self._token

    def send(self, message: PushwooshMessage) -> PendingMessage:
        """Start a new batch holding ``message``.

        Nothing is sent until the returned batch is flushed or its ``with``
        block ends.
        """
        return PendingMessage(self).queue(message)

    def build_request_payload(self, messages: Iterable[PushwooshMessage]) -> Dict[str, Any]:
        return {
            "request": {
                "application": self._application,
                "auth": self._token,
                "notifications": [message.to_payload() for message in messages],
            }
        }

    def create_message(self, pending: PendingMessage) -> List[Optional[str]]:
        """Create all messages of ``pending`` with one API call.

        Returns the message codes Pushwoosh assigned, in queue order. The list
        can be shorter than the batch; unassigned codes are ``None``.

        Raises:
            CommunicationError: The API could not be reached.
            ApiError: The API answered with a status code other than 200.
            UnknownDeviceError: The API rejected one or more device tokens.
        """
        payload = self.build_request_payload(pending.messages)
        request = requests.Request(
            "POST",
            self.endpoint,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            data=json.dumps(payload),
        )
        prepared = self.session.prepare_request(request)

        LOGGER.debug(
            "Pushwoosh createMessage | application=%s notifications=%d",
            self._application,
            len(payload["request"]["notifications"]),
        )

        try:
            response = self._send(prepared)
        except requests.RequestException as exc:
            response = self._try_again_if_caused_by_server_error(prepared, exc)

        result = _parse_json_response(response)

        status_code = result.get("status_code")
        if status_code is not None and status_code != 200:
            raise ApiError(str(result.get("status_message") or "Unknown Pushwoosh error"), status_code)

        inner = result.get("response") or {}
        if isinstance(inner, dict) and inner.get("UnknownDevices") is not None:
            raise UnknownDeviceError(inner["UnknownDevices"])

        pending.mark_sent()
        LOGGER.info("Created %d Pushwoosh message(s)", len(pending))

        codes = inner.get("Messages") if isinstance(inner, dict) else None
        if codes is None:
            return []
        return [code if code != CODE_NOT_AVAILABLE else None for code in codes]

    def _send(self, prepared: requests.PreparedRequest) -> requests.Response:
        response = self.session.send(prepared, timeout=self.timeout)
        response.raise_for_status()
        return response

    def _try_again_if_caused_by_server_error(
        self,
        prepared: requests.PreparedRequest,
        exc: requests.RequestException,
    ) -> requests.Response:
        if self._error_classifier(exc):
            LOGGER.warning("Pushwoosh server error, retrying once: %s", exc)
            try:
                return self._send(prepared)
            except requests.RequestException as retry_exc:
                LOGGER.debug("Pushwoosh retry failed: %s", retry_exc)

        raise CommunicationError("Failed to create message(s)") from exc
