"""Built-in pre-flight checks."""

from __future__ import annotations

import time

from preflight.pipeline.base import PreFlightCheck, elapsed_ms
from preflight.pipeline.binary import check_cli_availability
from preflight.pipeline.models import CheckStatus, PreFlightCheckResult, PreFlightContext
from preflight.schema.registry import available_commands
from preflight.validator.environment import (
    has_environment_requirements,
    validate_environment_for_command,
)
from preflight.validator.files import FileValidationRule, validate_file_paths
from preflight.validator.models import ValidationSeverity, create_issue
from preflight.validator.network import NetworkEndpoint, check_endpoints
from preflight.validator.parameters import validate_command_parameters


class BuiltinCheck(PreFlightCheck):
    """Shared result helpers for the built-in checks."""

    def _result(
        self,
        status: CheckStatus,
        start: float,
        message: str | None = None,
        issues: list | None = None,
    ) -> PreFlightCheckResult:
        return PreFlightCheckResult(
            check_id=self.id,
            label=self.label,
            status=status,
            message=message,
            duration_ms=elapsed_ms(start),
            issues=issues,
        )

    def _unexpected(self, ctx: PreFlightContext, start: float, exc: Exception) -> PreFlightCheckResult:
        ctx.logger.exception("Check '%s' raised unexpectedly", self.id)
        return self._result(CheckStatus.failed, start, f"Unexpected error: {exc}")


class CommandSyntaxCheck(BuiltinCheck):
    """Validate command syntax and parameters against the schema."""

    id = "command-syntax"
    label = "Command Syntax & Parameters"

    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        start = time.monotonic()

        if not ctx.schema_resolved:
            name = ctx.command_schema.name
            return self._result(
                CheckStatus.failed,
                start,
                f'Unknown command "{name}"',
                [
                    create_issue(
                        "UNKNOWN_COMMAND",
                        f'Unknown command: "{name}"',
                        suggestion=f"Available commands: {', '.join(available_commands())}",
                    )
                ],
            )

        try:
            result = validate_command_parameters(ctx.command_schema, ctx.parameters, ctx.logger)
        except Exception as exc:
            return self._unexpected(ctx, start, exc)

        if not result.valid:
            return self._result(
                CheckStatus.failed,
                start,
                f"{len(result.errors)} parameter error(s) found",
                result.issues,
            )
        if result.warnings:
            return self._result(
                CheckStatus.warning,
                start,
                f"Passed with {len(result.warnings)} warning(s)",
                result.issues,
            )
        return self._result(CheckStatus.passed, start, "All parameters valid")


class CliAvailabilityCheck(BuiltinCheck):
    """Verify the external CLI binary answers ``--version``."""

    id = "cli-availability"
    label = "CLI Availability"

    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        start = time.monotonic()

        if not ctx.command_schema.requires_cli:
            return self._result(CheckStatus.skipped, start, "CLI not required for this command")

        try:
            availability = await check_cli_availability(
                ctx.cli_path,
                ctx.cli_timeout_s,
                log=ctx.logger,
            )
        except Exception as exc:
            return self._unexpected(ctx, start, exc)

        if availability.available:
            ctx.logger.info("CLI found: %s", availability.version)
            return self._result(
                CheckStatus.passed, start, f"Stellar CLI found ({availability.version})"
            )

        if availability.timed_out:
            issue = create_issue(
                "CLI_TIMEOUT",
                f'Stellar CLI at "{ctx.cli_path}" did not respond within {ctx.cli_timeout_s:g}s.',
                field="cliPath",
                received_value=ctx.cli_path,
                suggestion="Check that the binary is not hanging, then retry.",
            )
            return self._result(
                CheckStatus.failed, start, f'Stellar CLI at "{ctx.cli_path}" timed out.', [issue]
            )

        issue = create_issue(
            "CLI_NOT_FOUND",
            "Stellar CLI not found. Please install it before running this command.",
            field="cliPath",
            received_value=ctx.cli_path,
            suggestion=(
                "Install via: cargo install --locked stellar-cli "
                "(see https://developers.stellar.org/docs/tools/cli)"
            ),
        )
        return self._result(
            CheckStatus.failed,
            start,
            f'Stellar CLI not found at "{ctx.cli_path}". Please install it before running this command.',
            [issue],
        )


class EnvironmentCheck(BuiltinCheck):
    """Validate env vars, config files and the runtime version."""

    id = "environment"
    label = "Environment Configuration"

    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        start = time.monotonic()

        if not has_environment_requirements(ctx.command_schema):
            return self._result(
                CheckStatus.skipped, start, "No environment requirements defined"
            )

        try:
            result = validate_environment_for_command(
                ctx.command_schema,
                environ=ctx.environ,
                base_path=ctx.base_path,
                log=ctx.logger,
            )
        except Exception as exc:
            return self._unexpected(ctx, start, exc)

        if not result.valid:
            return self._result(
                CheckStatus.failed,
                start,
                f"{len(result.errors)} environment issue(s)",
                result.issues,
            )
        if result.warnings:
            return self._result(CheckStatus.warning, start, "Environment verified", result.issues)
        return self._result(CheckStatus.passed, start, "Environment verified")


class FileValidationCheck(BuiltinCheck):
    """Validate the file rules supplied for this invocation."""

    id = "file-validation"
    label = "File Path Validation"

    def __init__(self, rules: list[FileValidationRule] | None = None) -> None:
        self._rules = list(rules or [])

    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        start = time.monotonic()

        if not self._rules:
            return self._result(CheckStatus.skipped, start, "No file paths to validate")

        try:
            result = validate_file_paths(self._rules, ctx.logger)
        except Exception as exc:
            return self._unexpected(ctx, start, exc)

        if not result.valid:
            return self._result(
                CheckStatus.failed,
                start,
                f"{len(result.errors)} file validation error(s)",
                result.issues,
            )
        if result.warnings:
            return self._result(
                CheckStatus.warning,
                start,
                f"Passed with {len(result.warnings)} warning(s)",
                result.issues,
            )
        return self._result(
            CheckStatus.passed, start, f"{len(self._rules)} file path(s) validated"
        )


class NetworkConnectivityCheck(BuiltinCheck):
    """Probe the RPC endpoint (and any extra endpoints) concurrently."""

    id = "network-connectivity"
    label = "Network Connectivity"

    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        start = time.monotonic()

        if not ctx.command_schema.requires_network:
            return self._result(
                CheckStatus.skipped, start, "Network not required for this command"
            )

        endpoints: list[NetworkEndpoint] = []
        if ctx.rpc_url:
            endpoints.append(
                NetworkEndpoint(
                    url=ctx.rpc_url, label="Stellar RPC", timeout_ms=ctx.network_timeout_ms
                )
            )
        endpoints.extend(ctx.network_endpoints)

        if not endpoints:
            return self._result(
                CheckStatus.warning,
                start,
                "No RPC URL configured to validate",
                [
                    create_issue(
                        "NO_RPC_URL",
                        "No RPC URL configured. Network connectivity could not be verified.",
                        severity=ValidationSeverity.warning,
                        suggestion="Set rpc_url in the pre-flight options.",
                    )
                ],
            )

        try:
            result = await check_endpoints(endpoints, log=ctx.logger)
        except Exception as exc:
            return self._unexpected(ctx, start, exc)

        if not result.valid:
            message = (
                "RPC endpoint unreachable"
                if len(endpoints) == 1
                else f"{len(result.errors)} of {len(endpoints)} endpoint(s) unreachable"
            )
            return self._result(CheckStatus.failed, start, message, result.issues)

        if ctx.rpc_url:
            message = f"RPC endpoint reachable ({ctx.rpc_url})"
        else:
            message = f"{len(endpoints)} endpoint(s) reachable"
        return self._result(CheckStatus.passed, start, message)
