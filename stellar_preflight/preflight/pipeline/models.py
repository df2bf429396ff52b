"""Pre-flight pipeline data models."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from preflight.pipeline.base import PreFlightCheck
from preflight.schema.models import CommandSchema, ParameterValue
from preflight.validator.files import FileValidationRule
from preflight.validator.models import ValidationIssue
from preflight.validator.network import DEFAULT_TIMEOUT_MS, NetworkEndpoint

DEFAULT_CLI_PATH = "stellar"
DEFAULT_CLI_TIMEOUT_S = 10.0


class CheckStatus(str, Enum):
    passed = "passed"
    failed = "failed"
    warning = "warning"
    skipped = "skipped"


class PreFlightCheckResult(BaseModel):
    """Outcome of one pipeline stage."""

    check_id: str
    label: str
    status: CheckStatus
    message: str | None = None
    duration_ms: int = 0
    issues: list[ValidationIssue] | None = None


class PreFlightReport(BaseModel):
    """Final output of a pipeline run. ``passed`` is derived from ``checks``."""

    dry_run: bool = False
    command: str
    checks: list[PreFlightCheckResult] = Field(default_factory=list)
    total_duration_ms: int = 0
    resolved_command_line: str | None = None
    timestamp: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> bool:
        return not any(c.status == CheckStatus.failed for c in self.checks)


class PreFlightContext(BaseModel):
    """Read-only inputs shared by every check in one run."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    command_schema: CommandSchema
    schema_resolved: bool = True
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    cli_path: str = DEFAULT_CLI_PATH
    rpc_url: str = ""
    dry_run: bool = False
    network_endpoints: list[NetworkEndpoint] = Field(default_factory=list)
    network_timeout_ms: int = DEFAULT_TIMEOUT_MS
    cli_timeout_s: float = DEFAULT_CLI_TIMEOUT_S
    base_path: str | None = None
    environ: dict[str, str] | None = None
    logger: logging.Logger = Field(default_factory=lambda: logging.getLogger("preflight.pipeline"))


class PreFlightOptions(BaseModel):
    """Everything a caller supplies to ``run_preflight_checks``.

    Either ``command_schema`` or ``command_name`` must be given; a schema
    overrides the registry lookup. ``network`` and ``source`` fill the matching flags when ``parameters``
    leaves them out.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    command_schema: CommandSchema | None = None
    command_name: str | None = None
    parameters: dict[str, ParameterValue] = Field(default_factory=dict)
    cli_path: str = DEFAULT_CLI_PATH
    network: str = ""
    source: str = ""
    rpc_url: str = ""
    file_rules: list[FileValidationRule] = Field(default_factory=list)
    dry_run: bool = False
    short_circuit: bool = True
    additional_checks: list[PreFlightCheck] = Field(default_factory=list)
    network_endpoints: list[NetworkEndpoint] = Field(default_factory=list)
    network_timeout_ms: int = DEFAULT_TIMEOUT_MS
    cli_timeout_s: float = DEFAULT_CLI_TIMEOUT_S
    base_path: str | None = None
    environ: dict[str, str] | None = None

    @model_validator(mode="after")
    def _require_command(self) -> PreFlightOptions:
        if self.command_schema is None and not self.command_name:
            raise ValueError("Either command_schema or command_name is required")
        return self
