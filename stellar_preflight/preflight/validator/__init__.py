"""Parameter, environment, file and network validators."""

from preflight.validator.environment import validate_environment, validate_environment_for_command
from preflight.validator.files import (
    FileExpectedType,
    FilePermission,
    FileValidationRule,
    validate_file_path,
    validate_file_paths,
)
from preflight.validator.models import ValidationIssue, ValidationResult, ValidationSeverity
from preflight.validator.network import (
    NetworkEndpoint,
    check_endpoint,
    check_endpoints,
    validate_network_connectivity,
)
from preflight.validator.parameters import validate_command_parameters, validate_parameter

__all__ = [
    "FileExpectedType",
    "FilePermission",
    "FileValidationRule",
    "NetworkEndpoint",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "check_endpoint",
    "check_endpoints",
    "validate_command_parameters",
    "validate_environment",
    "validate_environment_for_command",
    "validate_file_path",
    "validate_file_paths",
    "validate_network_connectivity",
    "validate_parameter",
]
