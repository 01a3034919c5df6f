from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any, Protocol

SEND_DATE_FORMAT = "%Y-%m-%d %H:%M"
MIN_SEND_RATE = 100
MAX_SEND_RATE = 1000
PLATFORMS = (None, "ios", "android")


class SupportsId(Protocol):
    id: Any


def _timezone_name(zone: tzinfo, moment: datetime | None = None) -> str | None:
    # zoneinfo exposes .key, pytz exposes .zone
    name = getattr(zone, "key", None) or getattr(zone, "zone", None)
    if name:
        return str(name)
    if isinstance(zone, timezone) and zone is not timezone.utc:
        offset = zone.utcoffset(None)
        minutes = int(offset.total_seconds()) // 60
        sign = "-" if minutes < 0 else "+"
        hours, minutes = divmod(abs(minutes), 60)
        return f"{sign}{hours:02d}:{minutes:02d}"
    return zone.tzname(moment)


def _require_flag(value: int, field_name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value not in (0, 1):
        raise ValueError(f"Invalid {field_name} {value!r}; expected 0 or 1")
    return value


class PushwooshMessage:
    """A single push notification for the Pushwoosh createMessage API.

    Every setter returns the message itself so calls can be chained::

        message = PushwooshMessage("Hello").url("https://example.com").throttle(300)

    Invalid values raise ``ValueError`` and leave the message untouched.
    """

    def __init__(self, content: str = "") -> None:
        self._content: str | dict[str, str] = content
        self._when: str = "now"
        self._timezone: str | None = None
        self._recipient_timezone = False
        self._identifier: str | None = None
        self._throughput: int | None = None
        self._url: str | None = None
        self._shorten_url: bool | None = None
        self._preset: str | None = None
        self._campaign: str | None = None
        self._apns_trim_content: int | None = None
        self._ios_badges: str | int | None = None
        self._ios_category_id: int | None = None
        self._ios_critical: bool | None = None
        self._ios_silent: int | None = None
        self._ios_sound: str | None = None
        self._ios_subtitle: str | None = None
        self._ios_thread_id: str | None = None
        self._ios_title: str | None = None
        self._ios_ttl: int | None = None
        self._android_root_parameters: dict[str, Any] | None = None
        self._ios_root_parameters: dict[str, Any] | None = None
        self._data: dict[str, Any] | None = None
        self._sent = False
        self._code: str | None = None

    def __repr__(self) -> str:
        return f"PushwooshMessage(content={self._content!r}, send_date={self._when!r}, sent={self._sent})"

    @property
    def sent(self) -> bool:
        return self._sent

    @property
    def code(self) -> str | None:
        """Message code Pushwoosh assigned to this message, if any."""
        return self._code

    def _mark_sent(self) -> None:
        self._sent = True

    def _assign_code(self, code: str | None) -> None:
        self._code = code

    def associate(self, notification: SupportsId) -> PushwooshMessage:
        """Use the notification id as identifier unless one was set already."""
        if not self._identifier:
            self._identifier = notification.id
        return self

    def apns_trim_content(self, value: int) -> PushwooshMessage:
        self._apns_trim_content = _require_flag(value, "apns trim content")
        return self

    def campaign(self, campaign: str) -> PushwooshMessage:
        self._campaign = campaign
        return self

    def content(self, content: str, language: str | None = None) -> PushwooshMessage:
        if language:
            if not isinstance(self._content, dict):
                self._content = {}
            self._content[language] = content
        else:
            self._content = content
        return self

    def deliver_at(self, when: datetime | str, timezone: tzinfo | str | None = None) -> PushwooshMessage:
        """Schedule the message.

        ``when`` is either a datetime or a ``YYYY-MM-DD HH:MM`` string. An aware
        datetime brings its own timezone, which takes precedence over ``timezone``.
        """
        if isinstance(when, datetime):
            if when.tzinfo is not None:
                timezone = when.tzinfo
            moment: datetime | None = when
            when = when.strftime(SEND_DATE_FORMAT)
        else:
            moment = None

        if isinstance(timezone, tzinfo):
            timezone = _timezone_name(timezone, moment)

        self._timezone = timezone
        self._when = when
        return self

    def identifier(self, identifier: str) -> PushwooshMessage:
        self._identifier = identifier
        return self

    def ios_badges(self, badges: str | int) -> PushwooshMessage:
        self._ios_badges = badges
        return self

    def ios_category_id(self, category_id: int) -> PushwooshMessage:
        self._ios_category_id = category_id
        return self

    def ios_critical(self, critical: bool) -> PushwooshMessage:
        self._ios_critical = bool(critical)
        return self

    def ios_silent(self, value: int) -> PushwooshMessage:
        self._ios_silent = _require_flag(value, "ios silent")
        return self

    def ios_sound(self, sound: str) -> PushwooshMessage:
        self._ios_sound = sound
        return self

    def ios_subtitle(self, subtitle: str) -> PushwooshMessage:
        self._ios_subtitle = subtitle
        return self

    def ios_thread_id(self, thread_id: str) -> PushwooshMessage:
        self._ios_thread_id = thread_id
        return self

    def ios_title(self, title: str) -> PushwooshMessage:
        self._ios_title = title
        return self

    def ios_ttl(self, ttl: int) -> PushwooshMessage:
        self._ios_ttl = ttl
        return self

    def preset(self, preset: str) -> PushwooshMessage:
        self._preset = preset
        return self

    def throttle(self, limit: int) -> PushwooshMessage:
        """Limit the rollout to ``limit`` pushes per second (100 to 1000)."""
        self._throughput = max(MIN_SEND_RATE, min(limit, MAX_SEND_RATE))
        return self

    def url(self, url: str, shorten: bool = True) -> PushwooshMessage:
        self._shorten_url = shorten
        self._url = url
        return self

    def use_recipient_timezone(self) -> PushwooshMessage:
        """Deliver at the scheduled time in each recipient's own timezone."""
        self._recipient_timezone = True
        return self

    def with_parameter(self, key: str, value: Any, platform: str | None = None) -> PushwooshMessage:
        """Add a root level parameter for Android, iOS or (by default) both."""
        if platform not in PLATFORMS:
            raise ValueError(f"Invalid platform {platform!r}")

        if (platform or "android") == "android":
            self._android_root_parameters = {**(self._android_root_parameters or {}), key: value}
            # android_root_params is not always honoured, data is
            self._data = {**(self._data or {}), key: value}

        if (platform or "ios") == "ios":
            self._ios_root_parameters = {**(self._ios_root_parameters or {}), key: value}

        return self

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation, leaving out every unset field."""
        content = dict(self._content) if isinstance(self._content, dict) else self._content
        payload: dict[str, Any] = {
            "android_root_params": self._copy(self._android_root_parameters),
            "apns_trim_content": self._apns_trim_content,
            "campaign": self._campaign,
            "content": content,
            "data": self._copy(self._data),
            "ignore_user_timezone": not self._recipient_timezone,
            "ios_badges": self._ios_badges,
            "ios_category_id": self._ios_category_id,
            "ios_critical": self._ios_critical,
            "ios_root_params": self._copy(self._ios_root_parameters),
            "ios_silent": self._ios_silent,
            "ios_sound": self._ios_sound,
            "ios_subtitle": self._ios_subtitle,
            "ios_thread_id": self._ios_thread_id,
            "ios_title": self._ios_title,
            "ios_ttl": self._ios_ttl,
            "link": self._url,
            "minimize_link": self._shorten_url if self._url else None,
            "preset": self._preset,
            "send_date": self._when,
            "send_rate": self._throughput,
            "transactionId": self._identifier,
            "timezone": self._timezone,
        }
        return {key: value for key, value in payload.items() if value is not None}

    @staticmethod
    def _copy(value: dict[str, Any] | None) -> dict[str, Any] | None:
        return dict(value) if value is not None else None
