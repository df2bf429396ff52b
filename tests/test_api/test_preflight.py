"""Tests for the pre-flight HTTP API."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from preflight.main import app


@pytest.fixture
def client(tmp_path: Path, monkeypatch) -> TestClient:
    opts = tmp_path / "options.json"
    opts.write_text(json.dumps({"cli_path": sys.executable, "rpc_url": ""}))
    monkeypatch.setenv("PREFLIGHT_OPTIONS_PATH", str(opts))
    with TestClient(app) as c:
        yield c


def test_list_commands(client: TestClient) -> None:
    resp = client.get("/api/commands")
    assert resp.status_code == 200
    keys = [c["key"] for c in resp.json()]
    assert keys == ["deploy", "build", "simulate", "configure"]


def test_get_command(client: TestClient) -> None:
    resp = client.get("/api/commands/simulate")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "contract invoke"
    assert data["requires_network"] is True
    assert data["parameters"][:2] == ["contractId", "functionName"]


def test_get_unknown_command(client: TestClient) -> None:
    assert client.get("/api/commands/launch").status_code == 404


def test_preflight_uses_settings_defaults(client: TestClient) -> None:
    resp = client.post("/api/preflight", json={"command": "deploy", "dry_run": True})
    assert resp.status_code == 200
    data = resp.json()
    report = data["report"]
    assert report["passed"] is True
    statuses = {c["check_id"]: c["status"] for c in report["checks"]}
    assert statuses["command-syntax"] == "passed"
    assert statuses["cli-availability"] == "passed"
    assert statuses["network-connectivity"] == "warning"
    assert report["resolved_command_line"].endswith(
        "contract deploy --network testnet --source dev"
    )
    assert "Dry run successful. Command would execute:" in data["text"]


def test_preflight_bad_parameters(client: TestClient) -> None:
    resp = client.post(
        "/api/preflight",
        json={"command": "deploy", "parameters": {"--network": "moon"}},
    )
    report = resp.json()["report"]
    assert report["passed"] is False
    assert report["checks"][0]["issues"][0]["code"] == "INVALID_ENUM_VALUE"
    assert all(c["status"] == "skipped" for c in report["checks"][1:])


def test_preflight_without_short_circuit(client: TestClient) -> None:
    resp = client.post(
        "/api/preflight",
        json={"command": "launch", "short_circuit": False},
    )
    checks = resp.json()["report"]["checks"]
    assert checks[0]["status"] == "failed"
    assert all(c["message"] != "Skipped due to previous failure" for c in checks)


def test_validate(client: TestClient) -> None:
    resp = client.post("/api/validate", json={"command": "simulate"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["result"]["valid"] is False
    codes = [i["code"] for i in data["result"]["all_issues"]]
    assert codes.count("MISSING_ARGUMENT") == 2
    assert codes.count("MISSING_PARAMETER") == 2
    assert "CLI_NOT_FOUND" not in codes
    assert "✘ Pre-flight validation failed:" in data["text"]
