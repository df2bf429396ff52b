"""Pre-execution validation gate for Stellar CLI invocations."""

from preflight.pipeline import (
    CheckStatus,
    PreFlightCheck,
    PreFlightCheckResult,
    PreFlightOptions,
    PreFlightReport,
    format_preflight_report,
    run_preflight_checks,
)
from preflight.schema import COMMAND_SCHEMAS, CommandSchema, ParameterSchema, ParameterType
from preflight.validator import ValidationIssue, ValidationResult, ValidationSeverity

__all__ = [
    "COMMAND_SCHEMAS",
    "CheckStatus",
    "CommandSchema",
    "ParameterSchema",
    "ParameterType",
    "PreFlightCheck",
    "PreFlightCheckResult",
    "PreFlightOptions",
    "PreFlightReport",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "format_preflight_report",
    "run_preflight_checks",
]
