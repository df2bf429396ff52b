"""Pre-flight settings: JSON options file with environment fallbacks."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel

from preflight.pipeline.models import DEFAULT_CLI_PATH, DEFAULT_CLI_TIMEOUT_S
from preflight.validator.network import DEFAULT_TIMEOUT_MS

DEFAULT_OPTIONS_PATH = "/data/options.json"


class PreflightSettings(BaseModel):
    """Defaults applied to every pre-flight run started through the API."""

    cli_path: str = DEFAULT_CLI_PATH
    rpc_url: str = "https://soroban-testnet.stellar.org"
    network: str = "testnet"
    source: str = "dev"
    network_timeout_ms: int = DEFAULT_TIMEOUT_MS
    cli_timeout_s: float = DEFAULT_CLI_TIMEOUT_S
    short_circuit: bool = True


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


def load_settings() -> PreflightSettings:
    """Load options from PREFLIGHT_OPTIONS_PATH, or fall back to env vars."""
    opts_path = Path(os.environ.get("PREFLIGHT_OPTIONS_PATH", DEFAULT_OPTIONS_PATH))
    if opts_path.exists():
        return PreflightSettings.model_validate(json.loads(opts_path.read_text()))

    defaults = PreflightSettings()
    return PreflightSettings(
        cli_path=os.environ.get("PREFLIGHT_CLI_PATH", defaults.cli_path),
        rpc_url=os.environ.get("PREFLIGHT_RPC_URL", defaults.rpc_url),
        network=os.environ.get("PREFLIGHT_NETWORK", defaults.network),
        source=os.environ.get("PREFLIGHT_SOURCE", defaults.source),
        network_timeout_ms=int(
            os.environ.get("PREFLIGHT_NETWORK_TIMEOUT_MS", str(defaults.network_timeout_ms))
        ),
        cli_timeout_s=float(os.environ.get("PREFLIGHT_CLI_TIMEOUT", str(defaults.cli_timeout_s))),
        short_circuit=_env_flag("PREFLIGHT_SHORT_CIRCUIT", defaults.short_circuit),
    )
