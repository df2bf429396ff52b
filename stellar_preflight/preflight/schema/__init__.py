"""Declarative command schemas and the predefined registry."""

from preflight.schema.models import CommandSchema, ParameterSchema, ParameterType, ParameterValue
from preflight.schema.registry import COMMAND_SCHEMAS, available_commands, get_command_schema
from preflight.schema.usage import (
    apply_connection_defaults,
    build_command_line,
    generate_usage_string,
    resolve_parameters,
)

__all__ = [
    "COMMAND_SCHEMAS",
    "CommandSchema",
    "ParameterSchema",
    "ParameterType",
    "ParameterValue",
    "apply_connection_defaults",
    "available_commands",
    "build_command_line",
    "generate_usage_string",
    "get_command_schema",
    "resolve_parameters",
]
