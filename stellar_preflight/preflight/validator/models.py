"""Validation data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    error = "error"
    warning = "warning"
    info = "info"


class ValidationIssue(BaseModel):
    """A single validation finding."""

    model_config = ConfigDict(frozen=True)

    severity: ValidationSeverity = ValidationSeverity.error
    code: str
    message: str
    field: str | None = None
    received_value: str | None = None
    expected_value: str | None = None
    suggestion: str | None = None


class ValidationResult(BaseModel):
    """Aggregated result of one validator run.

    Only ``issues`` is stored; ``valid``, ``errors`` and ``warnings`` are
    derived from it on access.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.error]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.warning]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return not self.errors


def create_issue(
    code: str,
    message: str,
    *,
    severity: ValidationSeverity = ValidationSeverity.error,
    field: str | None = None,
    received_value: str | None = None,
    expected_value: str | None = None,
    suggestion: str | None = None,
) -> ValidationIssue:
    """Build an issue; error severity unless stated otherwise."""
    return ValidationIssue(
        severity=severity,
        code=code,
        message=message,
        field=field,
        received_value=received_value,
        expected_value=expected_value,
        suggestion=suggestion,
    )


def build_result(issues: list[ValidationIssue]) -> ValidationResult:
    return ValidationResult(issues=list(issues))
