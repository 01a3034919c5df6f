from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import requests

from .client import API_ENDPOINT, DEFAULT_TIMEOUT, PushwooshClient
from .utils import load_yaml_file
from .validation import validate_config_data


@dataclass
class PushwooshSettings:
    application: str
    token: str
    timeout: float = DEFAULT_TIMEOUT
    endpoint: str = API_ENDPOINT


def load_settings(path: Path) -> PushwooshSettings:
    """Load settings from the ``pushwoosh`` block of a YAML file.

    ``$VAR`` references are expanded from the environment before validation.
    """
    data = load_yaml_file(path)
    report = validate_config_data(data)
    if not report.is_valid:
        details = "; ".join(f"{issue.path}: {issue.message}" for issue in report.errors)
        raise ValueError(f"Invalid Pushwoosh configuration in {path}: {details}")

    section = data["pushwoosh"]
    return PushwooshSettings(
        application=section["application"],
        token=section["token"],
        timeout=float(section.get("timeout", DEFAULT_TIMEOUT)),
        endpoint=section.get("endpoint") or API_ENDPOINT,
    )


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> PushwooshSettings:
    env = os.environ if environ is None else environ
    application = (env.get("PUSHWOOSH_APPLICATION") or "").strip()
    token = (env.get("PUSHWOOSH_TOKEN") or "").strip()
    missing = [
        name
        for name, value in (("PUSHWOOSH_APPLICATION", application), ("PUSHWOOSH_TOKEN", token))
        if not value
    ]
    if missing:
        raise ValueError(f"Missing Pushwoosh credentials: {', '.join(missing)}")

    raw_timeout = env.get("PUSHWOOSH_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise ValueError(f"PUSHWOOSH_TIMEOUT must be a number, got {raw_timeout!r}") from exc

    return PushwooshSettings(
        application=application,
        token=token,
        timeout=timeout,
        endpoint=(env.get("PUSHWOOSH_ENDPOINT") or "").strip() or API_ENDPOINT,
    )


def build_client(settings: PushwooshSettings, *, session: Optional[requests.Session] = None) -> PushwooshClient:
    return PushwooshClient(
        settings.application,
        settings.token,
        session=session,
        timeout=settings.timeout,
        endpoint=settings.endpoint,
    )
