"""Aggregate validation -- runs every validator and collects all issues.

Unlike the pre-flight pipeline this never short-circuits: it is meant for
showing a user everything that is wrong with an invocation at once.
"""

from __future__ import annotations

import logging
import time

from pydantic import BaseModel, Field

from preflight.pipeline.base import elapsed_ms
from preflight.pipeline.binary import CliAvailability, check_cli_availability
from preflight.pipeline.models import DEFAULT_CLI_PATH, DEFAULT_CLI_TIMEOUT_S
from preflight.pipeline.report import SEVERITY_ICONS
from preflight.schema.models import CommandSchema, ParameterValue
from preflight.schema.registry import available_commands, get_command_schema
from preflight.schema.usage import generate_usage_string
from preflight.validator.environment import validate_environment_for_command
from preflight.validator.files import FileValidationRule, validate_file_paths
from preflight.validator.models import (
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    build_result,
    create_issue,
)
from preflight.validator.network import DEFAULT_TIMEOUT_MS, NetworkEndpoint, check_endpoints
from preflight.validator.parameters import validate_command_parameters

logger = logging.getLogger(__name__)


class FullValidationOptions(BaseModel):
    command_name: str
    command_schema: CommandSchema | None = None
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    cli_path: str = DEFAULT_CLI_PATH
    cli_timeout_s: float = DEFAULT_CLI_TIMEOUT_S
    rpc_url: str | None = None
    network_timeout_ms: int = DEFAULT_TIMEOUT_MS
    file_rules: list[FileValidationRule] = Field(default_factory=list)
    network_endpoints: list[NetworkEndpoint] = Field(default_factory=list)
    dry_run: bool = False
    base_path: str | None = None
    environ: dict[str, str] | None = None
    skip_network_checks: bool = False
    skip_cli_check: bool = False


class FullValidationResult(BaseModel):
    valid: bool
    command_syntax: ValidationResult
    parameter_validation: ValidationResult
    cli_availability: CliAvailability | None = None
    environment_validation: ValidationResult
    file_validation: ValidationResult
    network_validation: ValidationResult
    all_issues: list[ValidationIssue]
    command_schema: CommandSchema
    usage_string: str
    dry_run: bool
    duration_ms: int


def validate_command_syntax(
    schema: CommandSchema,
    params: dict[str, ParameterValue],
) -> ValidationResult:
    """Report every missing required positional argument."""
    issues: list[ValidationIssue] = []
    for arg in schema.positional_args:
        value = params.get(arg.name)
        if arg.required and (value is None or value == ""):
            issues.append(
                create_issue(
                    "MISSING_ARGUMENT",
                    f"Missing required argument: {arg.display_name}",
                    field=arg.name,
                    suggestion=(
                        f"Usage: {schema.usage}"
                        if schema.usage
                        else f"Provide a value for {arg.display_name}."
                    ),
                )
            )
    return build_result(issues)


async def validate_command(
    options: FullValidationOptions,
    log: logging.Logger | None = None,
) -> FullValidationResult:
    """Run every validator for a command and combine the results.

    Steps: 1. syntax → 2. parameters → 3. CLI → 4. environment → 5. files
    → 6. network. A failing step never stops the following ones.
    """
    log = log or logger
    start = time.monotonic()
    schema = options.command_schema or get_command_schema(options.command_name)
    empty = build_result([])

    if schema is None:
        unknown = create_issue(
            "UNKNOWN_COMMAND",
            f'Unknown command: "{options.command_name}"',
            suggestion=f"Available commands: {', '.join(available_commands())}",
        )
        log.error("Unknown command '%s'", options.command_name)
        return FullValidationResult(
            valid=False,
            command_syntax=build_result([unknown]),
            parameter_validation=empty,
            environment_validation=empty,
            file_validation=empty,
            network_validation=empty,
            all_issues=[unknown],
            command_schema=CommandSchema(name=options.command_name, requires_cli=False),
            usage_string="",
            dry_run=options.dry_run,
            duration_ms=elapsed_ms(start),
        )

    params = options.parameters
    log.info(
        "Validating command '%s'%s...", schema.name, " (dry-run)" if options.dry_run else ""
    )

    command_syntax = validate_command_syntax(schema, params)
    parameter_validation = validate_command_parameters(schema, params, log)

    cli_availability: CliAvailability | None = None
    if schema.requires_cli and not options.skip_cli_check:
        cli_availability = await check_cli_availability(
            options.cli_path, options.cli_timeout_s, log=log,
        )

    environment_validation = validate_environment_for_command(
        schema, environ=options.environ, base_path=options.base_path, log=log,
    )
    file_validation = validate_file_paths(options.file_rules, log)

    network_validation = empty
    if schema.requires_network and not options.skip_network_checks:
        endpoints: list[NetworkEndpoint] = []
        if options.rpc_url:
            endpoints.append(
                NetworkEndpoint(
                    url=options.rpc_url, label="Stellar RPC", timeout_ms=options.network_timeout_ms
                )
            )
        endpoints.extend(options.network_endpoints)
        network_validation = await check_endpoints(endpoints, log=log)

    all_issues = [
        *command_syntax.issues,
        *parameter_validation.issues,
        *environment_validation.issues,
        *file_validation.issues,
        *network_validation.issues,
    ]
    if cli_availability is not None and cli_availability.timed_out:
        all_issues.append(
            create_issue(
                "CLI_TIMEOUT",
                f'Stellar CLI at "{cli_availability.path}" did not respond within '
                f"{options.cli_timeout_s:g}s.",
                field="cliPath",
                received_value=cli_availability.path,
                suggestion="Check that the binary is not hanging, then retry.",
            )
        )
    elif cli_availability is not None and not cli_availability.available:
        all_issues.append(
            create_issue(
                "CLI_NOT_FOUND",
                f'Stellar CLI not found at "{cli_availability.path}".',
                suggestion=(
                    "Install Stellar CLI (https://developers.stellar.org/docs/tools/cli) "
                    "or update the cli_path setting."
                ),
            )
        )

    valid = not any(i.severity == ValidationSeverity.error for i in all_issues)
    result = FullValidationResult(
        valid=valid,
        command_syntax=command_syntax,
        parameter_validation=parameter_validation,
        cli_availability=cli_availability,
        environment_validation=environment_validation,
        file_validation=file_validation,
        network_validation=network_validation,
        all_issues=all_issues,
        command_schema=schema,
        usage_string=generate_usage_string(schema),
        dry_run=options.dry_run,
        duration_ms=elapsed_ms(start),
    )

    if valid:
        log.info("All validations passed (%dms)", result.duration_ms)
    else:
        log.error(
            "Validation failed with %d error(s) (%dms)",
            sum(1 for i in all_issues if i.severity == ValidationSeverity.error),
            result.duration_ms,
        )
    return result


def format_validation_result(result: FullValidationResult) -> str:
    """Render an aggregate validation result for display."""
    lines: list[str] = []

    if result.valid:
        lines.append("✔ All validations passed.")
        if result.dry_run:
            schema = result.command_schema
            lines.append("")
            lines.append("Dry run successful. Command would execute:")
            lines.append(f"  {schema.usage or f'stellar {schema.name}'}")
    else:
        lines.append("✘ Pre-flight validation failed:")
        lines.append("")
        for issue in result.all_issues:
            lines.append(f"  {SEVERITY_ICONS[issue.severity]} [{issue.code}] {issue.message}")
            if issue.suggestion:
                lines.append(f"    → {issue.suggestion}")
        if result.usage_string:
            lines.append("")
            lines.append(result.usage_string)

    lines.append("")
    lines.append(f"Completed in {result.duration_ms}ms")
    return "\n".join(lines)
