"""Environment validation: env vars, config files and runtime version."""

from __future__ import annotations

import logging
import os
import platform
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

from preflight.schema.models import CommandSchema
from preflight.validator.models import ValidationIssue, ValidationResult, build_result, create_issue

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)")


def parse_version(version: str) -> tuple[int, ...] | None:
    """Parse "3.11.4", "v3.11" or "3.12.0rc1" into a tuple of ints."""
    match = VERSION_RE.match(version.strip())
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def _pad(version: tuple[int, ...], length: int) -> tuple[int, ...]:
    return version + (0,) * (length - len(version))


def _check_env_vars(
    required_vars: Sequence[str],
    environ: Mapping[str, str],
    log: logging.Logger,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for var_name in required_vars:
        value = environ.get(var_name)
        if value is None or not value.strip():
            log.warning("Missing environment variable: %s", var_name)
            issues.append(
                create_issue(
                    "MISSING_ENV_VAR",
                    f'Required environment variable "{var_name}" is not set.',
                    field=var_name,
                    suggestion=f"Set the environment variable: export {var_name}=<value>",
                )
            )
        else:
            log.debug("%s is set", var_name)
    return issues


def _check_config_files(
    required_files: Sequence[str],
    base_path: Path,
    log: logging.Logger,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for file_path in required_files:
        resolved = (base_path / file_path).resolve()
        if not resolved.exists():
            log.warning("Missing config file: %s", file_path)
            issues.append(
                create_issue(
                    "MISSING_CONFIG_FILE",
                    f'Required configuration file "{file_path}" not found.',
                    field=file_path,
                    suggestion=f"Create or restore the file at: {resolved}",
                )
            )
        elif not resolved.is_file():
            issues.append(
                create_issue(
                    "INVALID_CONFIG_FILE",
                    f'"{file_path}" exists but is not a file.',
                    field=file_path,
                    suggestion=f'Ensure "{file_path}" is a regular file, not a directory.',
                )
            )
        else:
            log.debug("Config file found: %s", file_path)
    return issues


def _check_runtime_version(
    min_version: str,
    runtime_version: str,
    log: logging.Logger,
) -> list[ValidationIssue]:
    required = parse_version(min_version)
    if required is None:
        return [
            create_issue(
                "INVALID_RUNTIME_VERSION",
                f'Cannot parse the minimum runtime version "{min_version}".',
                received_value=min_version,
                expected_value="a dotted version such as 3.10",
                suggestion="Fix the minimum runtime version declared for this command.",
            )
        ]

    current = parse_version(runtime_version) or (0,)
    length = max(len(required), len(current))
    if _pad(current, length) < _pad(required, length):
        log.warning(
            "Python %s is below the required minimum %s", runtime_version, min_version
        )
        return [
            create_issue(
                "UNSUPPORTED_RUNTIME_VERSION",
                f"Python {runtime_version} is below the minimum required version ({min_version}).",
                received_value=runtime_version,
                expected_value=f">= {min_version}",
                suggestion=f"Upgrade Python to {min_version} or higher.",
            )
        ]

    log.debug("Python %s meets minimum %s", runtime_version, min_version)
    return []


def validate_environment(
    required_env_vars: Sequence[str] = (),
    required_config_files: Sequence[str] = (),
    min_version: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    base_path: str | Path | None = None,
    runtime_version: str | None = None,
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Validate environment prerequisites.

    Every check runs regardless of earlier failures. ``environ`` is a
    snapshot of the variables to inspect (defaults to a copy of
    ``os.environ``) and ``runtime_version`` defaults to the running
    interpreter's version.
    """
    log = log or logger
    env = dict(os.environ) if environ is None else environ
    base = Path(base_path) if base_path is not None else Path.cwd()

    log.debug("Starting environment validation")

    issues: list[ValidationIssue] = []
    issues.extend(_check_env_vars(required_env_vars, env, log))
    issues.extend(_check_config_files(required_config_files, base, log))
    if min_version is not None:
        issues.extend(
            _check_runtime_version(
                min_version, runtime_version or platform.python_version(), log
            )
        )

    result = build_result(issues)
    if result.valid:
        log.debug("Environment validation passed")
    else:
        log.warning("Environment validation failed: %d error(s)", len(result.errors))
    return result


def validate_environment_for_command(
    schema: CommandSchema,
    *,
    environ: Mapping[str, str] | None = None,
    base_path: str | Path | None = None,
    runtime_version: str | None = None,
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Validate the environment requirements declared by a command schema."""
    return validate_environment(
        schema.required_env_vars,
        schema.required_config_files,
        schema.min_runtime_version,
        environ=environ,
        base_path=base_path,
        runtime_version=runtime_version,
        log=log,
    )


def has_environment_requirements(schema: CommandSchema) -> bool:
    return bool(
        schema.required_env_vars
        or schema.required_config_files
        or schema.min_runtime_version is not None
    )
