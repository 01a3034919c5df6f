from __future__ import annotations

import textwrap

import pytest

from pushwoosh.client import API_ENDPOINT, PushwooshClient
from pushwoosh.config import PushwooshSettings, build_client, load_settings, settings_from_env
from pushwoosh.utils import expand_env, load_yaml_file, validate_url
from pushwoosh.validation import validate_config_data


def _write(tmp_path, content: str):
    path = tmp_path / "pushwoosh.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_load_settings_expands_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("PW_APP", "ABCDE-12345")
    monkeypatch.setenv("PW_TOKEN", "secret")
    path = _write(
        tmp_path,
        """
        pushwoosh:
          application: ${PW_APP}
          token: $PW_TOKEN
          timeout: 5
        """,
    )

    settings = load_settings(path)

    assert settings == PushwooshSettings(application="ABCDE-12345", token="secret", timeout=5.0)
    assert settings.endpoint == API_ENDPOINT


def test_load_settings_rejects_invalid_config(tmp_path) -> None:
    path = _write(
        tmp_path,
        """
        pushwoosh:
          application: ABCDE-12345
          endpoint: not-a-url
        """,
    )

    with pytest.raises(ValueError, match="Invalid Pushwoosh configuration") as exc_info:
        load_settings(path)

    message = str(exc_info.value)
    assert "token" in message
    assert "pushwoosh.endpoint" in message


def test_load_yaml_file_requires_mapping(tmp_path) -> None:
    path = _write(tmp_path, "- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        load_yaml_file(path)


def test_validation_reports_schema_errors() -> None:
    report = validate_config_data({"pushwoosh": {"application": "", "token": "x", "timeout": 0, "extra": 1}})

    assert not report.is_valid
    paths = {issue.path for issue in report.errors}
    assert "pushwoosh.application" in paths
    assert "pushwoosh.timeout" in paths
    assert {issue.code for issue in report.errors} == {"schema"}


def test_validation_requires_pushwoosh_block() -> None:
    report = validate_config_data({})

    assert [issue.path for issue in report.errors] == ["<root>"]


def test_validation_warns_about_unexpanded_variables() -> None:
    report = validate_config_data({"pushwoosh": {"application": "$PW_APP", "token": "x"}})

    assert report.is_valid
    assert [issue.code for issue in report.warnings] == ["unexpanded-env"]


def test_settings_from_env() -> None:
    settings = settings_from_env(
        {
            "PUSHWOOSH_APPLICATION": " ABCDE-12345 ",
            "PUSHWOOSH_TOKEN": "secret",
            "PUSHWOOSH_TIMEOUT": "2.5",
            "PUSHWOOSH_ENDPOINT": "https://example.test/createMessage",
        }
    )

    assert settings.application == "ABCDE-12345"
    assert settings.timeout == 2.5
    assert settings.endpoint == "https://example.test/createMessage"


def test_settings_from_env_requires_credentials() -> None:
    with pytest.raises(ValueError, match="PUSHWOOSH_TOKEN"):
        settings_from_env({"PUSHWOOSH_APPLICATION": "ABCDE-12345"})


def test_settings_from_env_rejects_bad_timeout() -> None:
    with pytest.raises(ValueError, match="PUSHWOOSH_TIMEOUT"):
        settings_from_env({"PUSHWOOSH_APPLICATION": "a", "PUSHWOOSH_TOKEN": "b", "PUSHWOOSH_TIMEOUT": "soon"})


def test_build_client() -> None:
    client = build_client(PushwooshSettings(application="APP", token="token", timeout=3.0))

    assert isinstance(client, PushwooshClient)
    assert client.application == "APP"
    assert client.token == "token"
    assert client.timeout == 3.0


def test_expand_env_recurses(monkeypatch) -> None:
    monkeypatch.setenv("PW_VALUE", "expanded")

    assert expand_env({"a": ["$PW_VALUE", 1], "b": "${PW_VALUE}!"}) == {"a": ["expanded", 1], "b": "expanded!"}


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://cp.pushwoosh.com/json/1.3/createMessage", True),
        ("http://localhost:8080", True),
        ("ftp://example.com", False),
        ("", False),
        (None, False),
    ],
)
def test_validate_url(url, expected) -> None:
    assert validate_url(url) is expected
