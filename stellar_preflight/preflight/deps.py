"""Shared FastAPI dependencies."""

from __future__ import annotations

from preflight.config import PreflightSettings

_settings: PreflightSettings | None = None


def get_settings() -> PreflightSettings:
    """FastAPI dependency: return the loaded PreflightSettings."""
    assert _settings is not None, "PreflightSettings not initialised"
    return _settings
