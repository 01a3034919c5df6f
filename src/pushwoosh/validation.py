from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from jsonschema import Draft7Validator

from .utils import validate_url


@dataclass(slots=True)
class ValidationIssue:
    """Represents a single validation problem."""

    severity: str
    path: str
    message: str
    code: str


@dataclass(slots=True)
class ValidationReport:
    """Aggregates validation warnings and errors."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "pushwoosh": {
            "type": "object",
            "properties": {
                "application": {"type": "string", "minLength": 1},
                "token": {"type": "string", "minLength": 1},
                "timeout": {"type": ["number", "integer"], "exclusiveMinimum": 0},
                "endpoint": {"type": "string"},
            },
            "required": ["application", "token"],
            "additionalProperties": False,
        },
    },
    "required": ["pushwoosh"],
    "additionalProperties": True,
}


def _format_jsonschema_path(path: Sequence[Any]) -> str:
    parts: List[str] = []
    for part in path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}" if parts else str(part))
    return "".join(parts) or "<root>"


def validate_config_data(data: Dict[str, Any]) -> ValidationReport:
    """Validate configuration data against the schema and semantic rules."""
    report = ValidationReport()
    validator = Draft7Validator(CONFIG_SCHEMA)

    for error in sorted(validator.iter_errors(data), key=lambda exc: list(exc.path)):
        report.errors.append(
            ValidationIssue(
                severity="error",
                path=_format_jsonschema_path(error.absolute_path),
                message=error.message,
                code="schema",
            )
        )

    _validate_semantics(data, report)
    return report


def _validate_semantics(data: Dict[str, Any], report: ValidationReport) -> None:
    section = data.get("pushwoosh")
    if not isinstance(section, dict):
        return

    endpoint = section.get("endpoint")
    if isinstance(endpoint, str) and not validate_url(endpoint):
        report.errors.append(
            ValidationIssue(
                severity="error",
                path="pushwoosh.endpoint",
                message=f"Endpoint '{endpoint}' is not a valid http(s) URL",
                code="endpoint-url",
            )
        )

    for key in ("application", "token"):
        value = section.get(key)
        if isinstance(value, str) and value.startswith("$"):
            report.warnings.append(
                ValidationIssue(
                    severity="warning",
                    path=f"pushwoosh.{key}",
                    message=f"'{value}' looks like an unexpanded environment variable",
                    code="unexpanded-env",
                )
            )
