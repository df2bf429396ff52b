"""Pre-flight API -- command schemas, pipeline runs and aggregate validation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from preflight.config import PreflightSettings
from preflight.deps import get_settings
from preflight.pipeline import PreFlightOptions, PreFlightReport, format_preflight_report, run_preflight_checks
from preflight.schema import (
    COMMAND_SCHEMAS,
    ParameterValue,
    apply_connection_defaults,
    generate_usage_string,
    get_command_schema,
)
from preflight.service import (
    FullValidationOptions,
    FullValidationResult,
    format_validation_result,
    validate_command,
)
from preflight.validator import FileValidationRule, NetworkEndpoint

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["preflight"])


class CommandSummary(BaseModel):
    key: str
    name: str
    description: str | None = None
    usage: str
    requires_network: bool
    requires_cli: bool
    parameters: list[str] = Field(default_factory=list)


class PreflightRequest(BaseModel):
    command: str
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    file_rules: list[FileValidationRule] = Field(default_factory=list)
    network_endpoints: list[NetworkEndpoint] = Field(default_factory=list)
    dry_run: bool = False
    short_circuit: bool | None = None
    rpc_url: str | None = None


class PreflightResponse(BaseModel):
    report: PreFlightReport
    text: str


class ValidateResponse(BaseModel):
    result: FullValidationResult
    text: str


def _with_settings(
    command: str,
    params: dict[str, ParameterValue],
    settings: PreflightSettings,
) -> dict[str, ParameterValue]:
    """Fill --network and --source from settings when the caller left them out."""
    schema = get_command_schema(command)
    if schema is None:
        return dict(params)
    return apply_connection_defaults(schema, params, settings.network, settings.source)


def _summary(key: str) -> CommandSummary:
    schema = COMMAND_SCHEMAS[key]
    return CommandSummary(
        key=key,
        name=schema.name,
        description=schema.description,
        usage=generate_usage_string(schema),
        requires_network=schema.requires_network,
        requires_cli=schema.requires_cli,
        parameters=[p.name for p in schema.all_parameters],
    )


@router.get("/commands", response_model=list[CommandSummary])
async def list_commands() -> list[CommandSummary]:
    """List every predefined command schema."""
    return [_summary(key) for key in COMMAND_SCHEMAS]


@router.get("/commands/{key}", response_model=CommandSummary)
async def get_command(key: str) -> CommandSummary:
    """Return one command schema's summary."""
    if key not in COMMAND_SCHEMAS:
        raise HTTPException(status_code=404, detail=f"Unknown command: {key}")
    return _summary(key)


@router.post("/preflight", response_model=PreflightResponse)
async def run_preflight(
    body: PreflightRequest,
    settings: PreflightSettings = Depends(get_settings),
) -> PreflightResponse:
    """Run the pre-flight pipeline and return the report plus its text rendering."""
    options = PreFlightOptions(
        command_name=body.command,
        parameters=body.parameters,
        cli_path=settings.cli_path,
        network=settings.network,
        source=settings.source,
        rpc_url=body.rpc_url if body.rpc_url is not None else settings.rpc_url,
        file_rules=body.file_rules,
        network_endpoints=body.network_endpoints,
        dry_run=body.dry_run,
        short_circuit=(
            body.short_circuit if body.short_circuit is not None else settings.short_circuit
        ),
        network_timeout_ms=settings.network_timeout_ms,
        cli_timeout_s=settings.cli_timeout_s,
    )
    report = await run_preflight_checks(options)
    logger.info(
        "Pre-flight for '%s': %s", body.command, "passed" if report.passed else "failed"
    )
    return PreflightResponse(report=report, text=format_preflight_report(report))


@router.post("/validate", response_model=ValidateResponse)
async def run_validation(
    body: PreflightRequest,
    settings: PreflightSettings = Depends(get_settings),
) -> ValidateResponse:
    """Run every validator without short-circuiting and return all issues."""
    result = await validate_command(
        FullValidationOptions(
            command_name=body.command,
            parameters=_with_settings(body.command, body.parameters, settings),
            cli_path=settings.cli_path,
            cli_timeout_s=settings.cli_timeout_s,
            rpc_url=body.rpc_url if body.rpc_url is not None else settings.rpc_url,
            network_timeout_ms=settings.network_timeout_ms,
            file_rules=body.file_rules,
            network_endpoints=body.network_endpoints,
            dry_run=body.dry_run,
        )
    )
    return ValidateResponse(result=result, text=format_validation_result(result))
