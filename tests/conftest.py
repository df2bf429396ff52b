"""Shared test fixtures and configuration."""

import logging
import os
import sys
from pathlib import Path

# Add stellar_preflight/ to Python path so `from preflight.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "stellar_preflight"))

import pytest

os.environ["PREFLIGHT_DEV_MODE"] = "true"


@pytest.fixture
def test_logger() -> logging.Logger:
    return logging.getLogger("preflight.tests")


@pytest.fixture
def wasm_file(tmp_path: Path) -> Path:
    path = tmp_path / "contract.wasm"
    path.write_bytes(b"\x00asm\x01\x00\x00\x00")
    return path
