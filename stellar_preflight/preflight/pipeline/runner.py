"""Pre-flight pipeline runner -- sequences checks with short-circuit support."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from preflight.pipeline.base import PreFlightCheck, elapsed_ms
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
from preflight.pipeline.report import STATUS_ICONS
from preflight.schema.models import CommandSchema
from preflight.schema.registry import get_command_schema
from preflight.schema.usage import apply_connection_defaults, build_command_line

logger = logging.getLogger(__name__)

SKIPPED_MESSAGE = "Skipped due to previous failure"


def _resolve_schema(options: PreFlightOptions) -> tuple[CommandSchema, bool]:
    """Return the schema to validate against and whether it was found.

    An unknown command name yields an empty placeholder schema so the
    pipeline can still run; the syntax check reports the unknown name.
    """
    if options.command_schema is not None:
        return options.command_schema, True
    name = options.command_name or ""
    schema = get_command_schema(name)
    if schema is None:
        return CommandSchema(name=name, requires_cli=False), False
    return schema, True


def build_pipeline(options: PreFlightOptions) -> list[PreFlightCheck]:
    """Default check order followed by any caller-supplied checks."""
    return [
        CommandSyntaxCheck(),
        CliAvailabilityCheck(),
        EnvironmentCheck(),
        FileValidationCheck(options.file_rules),
        NetworkConnectivityCheck(),
        *options.additional_checks,
    ]


async def _run_check(check: PreFlightCheck, ctx: PreFlightContext) -> PreFlightCheckResult:
    """Execute one check; a fault escaping it becomes a failed result."""
    start = time.monotonic()
    try:
        return await check.execute(ctx)
    except Exception as exc:
        ctx.logger.exception("Pre-flight check '%s' raised", check.id)
        return PreFlightCheckResult(
            check_id=check.id,
            label=check.label,
            status=CheckStatus.failed,
            message=f"Unexpected error: {exc}",
            duration_ms=elapsed_ms(start),
        )


async def run_preflight_checks(
    options: PreFlightOptions,
    log: logging.Logger | None = None,
) -> PreFlightReport:
    """Execute the full pre-flight pipeline and return its report.

    Checks run one at a time in order. Once a check fails and
    ``short_circuit`` is on, every remaining check is recorded as skipped
    without being executed.
    """
    log = log or logger
    start = time.monotonic()
    schema, resolved = _resolve_schema(options)
    params = apply_connection_defaults(
        schema, options.parameters, options.network, options.source
    )

    ctx = PreFlightContext(
        command_schema=schema,
        schema_resolved=resolved,
        parameters=params,
        cli_path=options.cli_path,
        rpc_url=options.rpc_url,
        dry_run=options.dry_run,
        network_endpoints=options.network_endpoints,
        network_timeout_ms=options.network_timeout_ms,
        cli_timeout_s=options.cli_timeout_s,
        base_path=options.base_path,
        environ=options.environ,
        logger=log,
    )

    checks = build_pipeline(options)
    results: list[PreFlightCheckResult] = []
    failed = False

    log.info("Running %d pre-flight check(s) for '%s'...", len(checks), schema.name)

    for check in checks:
        if failed and options.short_circuit:
            results.append(
                PreFlightCheckResult(
                    check_id=check.id,
                    label=check.label,
                    status=CheckStatus.skipped,
                    message=SKIPPED_MESSAGE,
                    duration_ms=0,
                )
            )
            continue

        result = await _run_check(check, ctx)
        results.append(result)
        log.info(
            "  %s %s: %s",
            STATUS_ICONS[result.status],
            result.label,
            result.message or result.status.value,
        )

        if result.status == CheckStatus.failed:
            failed = True

    report = PreFlightReport(
        dry_run=options.dry_run,
        command=schema.name,
        checks=results,
        total_duration_ms=elapsed_ms(start),
        resolved_command_line=build_command_line(schema, params, options.cli_path),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

    if report.passed:
        log.info("All pre-flight checks passed (%dms)", report.total_duration_ms)
        if report.dry_run:
            log.info("Dry run successful. Command would execute: %s", report.resolved_command_line)
    else:
        log.error("Pre-flight checks failed (%dms)", report.total_duration_ms)

    return report
