"""Tests for preflight.validator.parameters -- schema-based parameter checks."""

from __future__ import annotations

import logging
import re

import pytest

from preflight.schema.models import CommandSchema, ParameterSchema, ParameterType
from preflight.schema.registry import COMMAND_SCHEMAS, CONTRACT_ID_ARG
from preflight.validator.models import ValidationSeverity
from preflight.validator.parameters import (
    find_similar_flag,
    levenshtein_distance,
    validate_command_parameters,
    validate_parameter,
)


def _codes(result) -> list[str]:
    return [i.code for i in result.issues]


def _schema(*flags: ParameterSchema, aliases: dict[str, str] | None = None) -> CommandSchema:
    return CommandSchema(name="test", flags=list(flags), aliases=aliases or {})


# ---------------------------------------------------------------------------
# validate_parameter
# ---------------------------------------------------------------------------

class TestRequired:
    def test_missing_required(self) -> None:
        p = ParameterSchema(name="--source", label="Source", required=True)
        result = validate_parameter(p, None)
        assert not result.valid
        assert _codes(result) == ["MISSING_PARAMETER"]
        assert result.issues[0].message == "Missing required parameter: Source"

    def test_blank_string_counts_as_missing(self) -> None:
        p = ParameterSchema(name="--source", required=True)
        assert _codes(validate_parameter(p, "   ")) == ["MISSING_PARAMETER"]

    def test_suggestion_uses_description(self) -> None:
        p = ParameterSchema(name="--source", required=True, description="Signing identity")
        issue = validate_parameter(p, None).issues[0]
        assert issue.suggestion == "Provide --source: Signing identity"

    def test_missing_required_skips_type_checks(self) -> None:
        p = ParameterSchema(name="--count", type=ParameterType.number, required=True)
        assert _codes(validate_parameter(p, "")) == ["MISSING_PARAMETER"]

    def test_optional_absent_is_valid(self) -> None:
        p = ParameterSchema(name="--count", type=ParameterType.number)
        result = validate_parameter(p, None)
        assert result.valid
        assert result.issues == []


class TestNumber:
    def test_numeric_string_accepted(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number)
        assert validate_parameter(p, "100").valid

    def test_non_numeric(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number)
        result = validate_parameter(p, "abc")
        assert _codes(result) == ["INVALID_TYPE"]
        assert result.issues[0].expected_value == "number"

    def test_boolean_is_not_a_number(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number)
        assert _codes(validate_parameter(p, True)) == ["INVALID_TYPE"]

    def test_nan_is_not_a_number(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number)
        assert _codes(validate_parameter(p, "nan")) == ["INVALID_TYPE"]

    def test_below_min(self) -> None:
        p = ParameterSchema(name="--fee", label="Fee", type=ParameterType.number, min=1)
        result = validate_parameter(p, 0)
        assert _codes(result) == ["OUT_OF_RANGE"]
        assert result.issues[0].message == "Fee must be at least 1, got 0"

    def test_above_max(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number, min=1, max=10)
        result = validate_parameter(p, "11")
        assert _codes(result) == ["OUT_OF_RANGE"]
        assert result.issues[0].expected_value == "<= 10"

    def test_bounds_inclusive(self) -> None:
        p = ParameterSchema(name="--fee", type=ParameterType.number, min=1, max=10)
        assert validate_parameter(p, 1).valid
        assert validate_parameter(p, 10).valid


class TestBoolean:
    @pytest.mark.parametrize("value", [True, False, "true", "FALSE", "1", "0", "yes", "No"])
    def test_accepted_literals(self, value) -> None:
        p = ParameterSchema(name="--dry-run", type=ParameterType.boolean)
        assert validate_parameter(p, value).valid

    def test_rejected_literal(self) -> None:
        p = ParameterSchema(name="--dry-run", type=ParameterType.boolean)
        result = validate_parameter(p, "maybe")
        assert _codes(result) == ["INVALID_BOOLEAN"]
        assert result.issues[0].received_value == "maybe"


class TestEnum:
    def test_case_insensitive_match(self) -> None:
        p = ParameterSchema(name="--network", type=ParameterType.enum, enum_values=["testnet"])
        assert validate_parameter(p, "TESTNET").valid

    def test_invalid_value_lists_allowed(self) -> None:
        p = ParameterSchema(
            name="--network", type=ParameterType.enum, enum_values=["testnet", "mainnet"]
        )
        result = validate_parameter(p, "moon")
        assert _codes(result) == ["INVALID_ENUM_VALUE"]
        assert result.issues[0].suggestion == "Allowed values: testnet, mainnet"


class TestFormat:
    def test_pattern_mismatch_uses_description(self) -> None:
        p = ParameterSchema(
            name="contractId",
            pattern=re.compile(r"^C[A-Z0-9]{55}$"),
            pattern_description="56 characters starting with C",
        )
        result = validate_parameter(p, "not-a-contract")
        assert _codes(result) == ["INVALID_FORMAT"]
        assert result.issues[0].suggestion == "Expected format: 56 characters starting with C"

    def test_pattern_match(self) -> None:
        p = ParameterSchema(name="contractId", pattern=re.compile(r"^C[A-Z0-9]{55}$"))
        assert validate_parameter(p, "C" + "A" * 55).valid

    def test_trailing_newline_rejected(self) -> None:
        result = validate_parameter(CONTRACT_ID_ARG, "C" + "A" * 55 + "\n")
        assert _codes(result) == ["INVALID_FORMAT"]

    def test_unanchored_pattern_must_match_whole_value(self) -> None:
        p = ParameterSchema(name="fn", pattern=r"[a-z]+")
        assert not validate_parameter(p, "hello world").valid

    def test_pattern_compiled_from_string(self) -> None:
        p = ParameterSchema(name="fn", pattern=r"^[a-z_]+$")
        assert validate_parameter(p, "hello").valid
        assert not validate_parameter(p, "Hello!").valid

    def test_path_type_not_format_checked(self) -> None:
        p = ParameterSchema(name="--wasm", type=ParameterType.path)
        assert validate_parameter(p, "anything at all").valid


# ---------------------------------------------------------------------------
# Cross-parameter constraints
# ---------------------------------------------------------------------------

class TestConstraints:
    def test_mutual_exclusion_reported_once(self) -> None:
        schema = _schema(
            ParameterSchema(name="--wasm", mutually_exclusive_with=["--wasm-hash"]),
            ParameterSchema(name="--wasm-hash", mutually_exclusive_with=["--wasm"]),
        )
        result = validate_command_parameters(schema, {"--wasm": "a.wasm", "--wasm-hash": "abc"})
        assert _codes(result) == ["MUTUALLY_EXCLUSIVE"]

    def test_mutual_exclusion_only_one_present(self) -> None:
        schema = _schema(
            ParameterSchema(name="--wasm", mutually_exclusive_with=["--wasm-hash"]),
            ParameterSchema(name="--wasm-hash"),
        )
        assert validate_command_parameters(schema, {"--wasm": "a.wasm"}).valid

    def test_missing_dependency(self) -> None:
        schema = _schema(
            ParameterSchema(name="--fee", depends_on=["--source"]),
            ParameterSchema(name="--source"),
        )
        result = validate_command_parameters(schema, {"--fee": "100"})
        assert _codes(result) == ["MISSING_DEPENDENCY"]
        assert result.issues[0].field == "--fee"

    def test_dependency_satisfied(self) -> None:
        schema = _schema(
            ParameterSchema(name="--fee", depends_on=["--source"]),
            ParameterSchema(name="--source"),
        )
        assert validate_command_parameters(schema, {"--fee": "100", "--source": "dev"}).valid


# ---------------------------------------------------------------------------
# Unknown flags and suggestions
# ---------------------------------------------------------------------------

class TestUnknownFlags:
    def test_levenshtein(self) -> None:
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_similar_flag_found(self) -> None:
        assert find_similar_flag("--netwrk", {"--network", "--source"}) == "--network"

    def test_no_similar_flag_beyond_threshold(self) -> None:
        assert find_similar_flag("--completely-different", {"--network"}) is None

    def test_unknown_flag_with_suggestion(self) -> None:
        schema = COMMAND_SCHEMAS["deploy"]
        result = validate_command_parameters(
            schema, {"--netwrk": "testnet", "--network": "testnet", "--source": "dev"}
        )
        assert _codes(result) == ["UNKNOWN_FLAG"]
        issue = result.issues[0]
        assert issue.message == 'Unknown flag: "--netwrk"'
        assert issue.suggestion == 'Did you mean "--network"? Run with --help for usage.'

    def test_unknown_flag_without_suggestion(self) -> None:
        schema = _schema(ParameterSchema(name="--network"))
        result = validate_command_parameters(schema, {"--zzzzzzzzzz": "x"})
        assert result.issues[0].suggestion == "Run with --help to see available options."

    def test_alias_is_known(self) -> None:
        schema = COMMAND_SCHEMAS["deploy"]
        result = validate_command_parameters(schema, {"-n": "testnet", "-s": "dev"})
        assert result.valid

    def test_alias_does_not_override_canonical(self) -> None:
        schema = COMMAND_SCHEMAS["deploy"]
        result = validate_command_parameters(
            schema, {"-n": "moon", "--network": "testnet", "--source": "dev"}
        )
        assert result.valid


# ---------------------------------------------------------------------------
# End-to-end against the deploy schema
# ---------------------------------------------------------------------------

class TestDeploySchema:
    def test_bad_network_and_missing_source(self) -> None:
        result = validate_command_parameters(COMMAND_SCHEMAS["deploy"], {"--network": "moon"})
        assert not result.valid
        codes = _codes(result)
        assert "INVALID_ENUM_VALUE" in codes
        assert "MISSING_PARAMETER" in codes
        missing = next(i for i in result.issues if i.code == "MISSING_PARAMETER")
        assert missing.field == "--source"

    def test_valid_invocation(self) -> None:
        result = validate_command_parameters(
            COMMAND_SCHEMAS["deploy"], {"--network": "testnet", "--source": "dev"}
        )
        assert result.valid
        assert result.errors == []

    def test_issues_are_errors(self) -> None:
        result = validate_command_parameters(COMMAND_SCHEMAS["deploy"], {})
        assert all(i.severity == ValidationSeverity.error for i in result.issues)
        assert len(result.errors) == len(result.issues)

    def test_logs_failure(self, caplog: pytest.LogCaptureFixture, test_logger: logging.Logger) -> None:
        with caplog.at_level(logging.WARNING, logger="preflight.tests"):
            validate_command_parameters(COMMAND_SCHEMAS["deploy"], {}, test_logger)
        assert "Parameter validation failed for 'contract deploy'" in caplog.text
