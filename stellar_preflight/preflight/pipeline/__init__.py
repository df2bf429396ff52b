"""Pre-flight check pipeline."""

from preflight.pipeline.base import PreFlightCheck
from preflight.pipeline.checks import (
    CliAvailabilityCheck,
    CommandSyntaxCheck,
    EnvironmentCheck,
    FileValidationCheck,
    NetworkConnectivityCheck,
)
from preflight.pipeline.models import (
    CheckStatus,
    PreFlightCheckResult,
    PreFlightContext,
    PreFlightOptions,
    PreFlightReport,
)
from preflight.pipeline.report import format_preflight_report
from preflight.pipeline.runner import run_preflight_checks

__all__ = [
    "CheckStatus",
    "CliAvailabilityCheck",
    "CommandSyntaxCheck",
    "EnvironmentCheck",
    "FileValidationCheck",
    "NetworkConnectivityCheck",
    "PreFlightCheck",
    "PreFlightCheckResult",
    "PreFlightContext",
    "PreFlightOptions",
    "PreFlightReport",
    "format_preflight_report",
    "run_preflight_checks",
]
