"""Schema-based parameter validation for CLI commands.

Checks types, formats, ranges, enum membership, unknown flags, mutual
exclusion and dependency constraints. Every problem is reported as a
ValidationIssue; nothing here raises on bad input.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from preflight.schema.models import CommandSchema, ParameterSchema, ParameterType, ParameterValue
from preflight.schema.usage import resolve_parameters
from preflight.validator.models import (
    ValidationIssue,
    ValidationResult,
    build_result,
    create_issue,
)

logger = logging.getLogger(__name__)

BOOLEAN_LITERALS = {"true", "false", "1", "0", "yes", "no"}

# Maximum edit distance for a "did you mean" suggestion
MAX_SUGGESTION_DISTANCE = 3


def _is_present(value: ParameterValue) -> bool:
    return value is not None


def _check_required(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    if not schema.required:
        return None
    if value is None or (isinstance(value, str) and not value.strip()):
        if schema.description:
            suggestion = f"Provide {schema.display_name}: {schema.description}"
        else:
            suggestion = f"Provide a value for {schema.display_name}."
        return create_issue(
            "MISSING_PARAMETER",
            f"Missing required parameter: {schema.display_name}",
            field=schema.name,
            suggestion=suggestion,
        )
    return None


def _check_number(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    number: float | None = None
    if not isinstance(value, bool):
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            number = None
    if number is None or math.isnan(number):
        return create_issue(
            "INVALID_TYPE",
            f'{schema.display_name} must be a number, got "{value}"',
            field=schema.name,
            received_value=str(value),
            expected_value="number",
            suggestion="Provide a valid numeric value.",
        )

    if schema.min is not None and number < schema.min:
        return create_issue(
            "OUT_OF_RANGE",
            f"{schema.display_name} must be at least {_fmt(schema.min)}, got {value}",
            field=schema.name,
            received_value=str(value),
            expected_value=f">= {_fmt(schema.min)}",
            suggestion=f"Provide a value of at least {_fmt(schema.min)}.",
        )
    if schema.max is not None and number > schema.max:
        return create_issue(
            "OUT_OF_RANGE",
            f"{schema.display_name} must be at most {_fmt(schema.max)}, got {value}",
            field=schema.name,
            received_value=str(value),
            expected_value=f"<= {_fmt(schema.max)}",
            suggestion=f"Provide a value of at most {_fmt(schema.max)}.",
        )
    return None


def _fmt(bound: float) -> str:
    """Render 10.0 as "10" and 2.5 as "2.5"."""
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_boolean(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    if isinstance(value, bool):
        return None
    if str(value).strip().lower() in BOOLEAN_LITERALS:
        return None
    return create_issue(
        "INVALID_BOOLEAN",
        f'Invalid boolean value "{value}" for {schema.display_name}',
        field=schema.name,
        received_value=str(value),
        expected_value="true | false",
        suggestion="Use true/false, yes/no, or 1/0.",
    )


def _check_enum(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    lowered = str(value).lower()
    if any(v.lower() == lowered for v in schema.enum_values):
        return None
    allowed = ", ".join(schema.enum_values)
    return create_issue(
        "INVALID_ENUM_VALUE",
        f'Invalid value "{value}" for {schema.display_name}',
        field=schema.name,
        received_value=str(value),
        expected_value=allowed,
        suggestion=f"Allowed values: {allowed}",
    )


def _check_format(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    if schema.pattern is None or not isinstance(value, str):
        return None
    if schema.pattern.fullmatch(value):
        return None
    if schema.pattern_description:
        suggestion = f"Expected format: {schema.pattern_description}"
    else:
        suggestion = f"Value must match pattern {schema.pattern.pattern}."
    return create_issue(
        "INVALID_FORMAT",
        f'Invalid format for {schema.display_name}: "{value}"',
        field=schema.name,
        received_value=value,
        expected_value=schema.pattern_description or schema.pattern.pattern,
        suggestion=suggestion,
    )


def _check_type(schema: ParameterSchema, value: ParameterValue) -> ValidationIssue | None:
    if schema.type == ParameterType.number:
        return _check_number(schema, value)
    if schema.type == ParameterType.boolean:
        return _check_boolean(schema, value)
    if schema.type == ParameterType.enum:
        return _check_enum(schema, value)
    if schema.type == ParameterType.string:
        return _check_format(schema, value)
    return None


def validate_parameter(schema: ParameterSchema, value: ParameterValue) -> ValidationResult:
    """Validate a single value against its parameter schema.

    A missing required value stops further checks for that parameter.
    """
    missing = _check_required(schema, value)
    if missing is not None:
        return build_result([missing])

    issues: list[ValidationIssue] = []
    if _is_present(value):
        type_issue = _check_type(schema, value)
        if type_issue is not None:
            issues.append(type_issue)
    return build_result(issues)


# -- Cross-parameter checks --


def _validate_mutual_exclusion(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    checked: set[tuple[str, ...]] = set()

    for param in schema.all_parameters:
        if not _is_present(params.get(param.name)):
            continue
        for other_name in param.mutually_exclusive_with:
            key = tuple(sorted((param.name, other_name)))
            if key in checked:
                continue
            checked.add(key)

            if _is_present(params.get(other_name)):
                other = schema.get_parameter(other_name)
                other_label = other.display_name if other else other_name
                issues.append(
                    create_issue(
                        "MUTUALLY_EXCLUSIVE",
                        f'Parameters "{param.display_name}" and "{other_label}" '
                        "cannot be used together.",
                        field=param.name,
                        suggestion=f'Remove either "{param.display_name}" or "{other_label}".',
                    )
                )
    return issues


def _validate_dependencies(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    for param in schema.all_parameters:
        if not _is_present(params.get(param.name)):
            continue
        for dep_name in param.depends_on:
            if _is_present(params.get(dep_name)):
                continue
            issues.append(
                create_issue(
                    "MISSING_DEPENDENCY",
                    f'Parameter "{param.display_name}" requires "{dep_name}" to be specified.',
                    field=param.name,
                    suggestion=f'Also provide "{dep_name}" when using "{param.display_name}".',
                )
            )
    return issues


# -- Unknown flags --


def levenshtein_distance(s1: str, s2: str) -> int:
    """Edit distance with unit insert, delete and substitute costs."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row: list[int] = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row: list[int] = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def find_similar_flag(name: str, known: set[str]) -> str | None:
    """Return the closest known name within MAX_SUGGESTION_DISTANCE, if any."""
    stripped = name.lstrip("-")
    best: str | None = None
    best_distance = MAX_SUGGESTION_DISTANCE + 1

    # Sorted so ties resolve the same way on every run
    for candidate in sorted(known):
        distance = levenshtein_distance(stripped, candidate.lstrip("-"))
        if distance < best_distance:
            best_distance = distance
            best = candidate
    return best


def _detect_unknown_flags(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    known = schema.known_names

    for key in params:
        if key in known:
            continue
        similar = find_similar_flag(key, known)
        if similar:
            suggestion = f'Did you mean "{similar}"? Run with --help for usage.'
        else:
            suggestion = "Run with --help to see available options."
        issues.append(
            create_issue(
                "UNKNOWN_FLAG",
                f'Unknown flag: "{key}"',
                field=key,
                suggestion=suggestion,
            )
        )
    return issues


def validate_command_parameters(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Validate every supplied parameter for a command against its schema.

    Order: 1. Unknown flags → 2. Alias resolution → 3. Per-parameter checks
    in declaration order → 4. Mutual exclusion and dependencies.
    """
    log = log or logger
    log.debug(
        "Validating %d parameter(s) against '%s' schema", len(params), schema.name
    )

    issues = _detect_unknown_flags(schema, params)

    resolved = resolve_parameters(schema, params)

    for param in schema.all_parameters:
        issues.extend(validate_parameter(param, resolved.get(param.name)).issues)

    issues.extend(_validate_mutual_exclusion(schema, resolved))
    issues.extend(_validate_dependencies(schema, resolved))

    result = build_result(issues)
    if result.valid:
        log.debug("All parameters valid for '%s'", schema.name)
    else:
        log.warning(
            "Parameter validation failed for '%s' with %d error(s)",
            schema.name,
            len(result.errors),
        )
    return result
