"""Classification of transport failures raised while talking to Pushwoosh."""

from __future__ import annotations

from typing import Callable

import requests

ErrorClassifier = Callable[[BaseException], bool]


def caused_by_server_error(exc: BaseException) -> bool:
    """Return True when the failure is a 5xx answer from the Pushwoosh servers.

    Those are worth a single retry; everything else (connection errors,
    timeouts, 4xx answers) is treated as fatal.
    """
    if not isinstance(exc, requests.HTTPError):
        return False
    response = exc.response
    if response is None:
        return False
    return 500 <= response.status_code < 600
