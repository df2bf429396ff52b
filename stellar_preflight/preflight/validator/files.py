"""File path validation: existence, entry type, extension and permissions."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from preflight.validator.models import ValidationIssue, ValidationResult, build_result, create_issue

logger = logging.getLogger(__name__)


class FileExpectedType(str, Enum):
    file = "file"
    directory = "directory"
    any = "any"


class FilePermission(str, Enum):
    read = "read"
    write = "write"
    execute = "execute"


PERMISSION_MODES = {
    FilePermission.read: os.R_OK,
    FilePermission.write: os.W_OK,
    FilePermission.execute: os.X_OK,
}


class FileValidationRule(BaseModel):
    """What to check for one path."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    expected_type: FileExpectedType = FileExpectedType.any
    permissions: list[FilePermission] = Field(default_factory=list)
    allowed_extensions: list[str] = Field(default_factory=list)
    label: str | None = None
    base_path: str | None = None
    must_exist: bool = True

    @property
    def display_name(self) -> str:
        return self.label or self.file_path


def resolve_file_path(rule: FileValidationRule) -> Path:
    """Resolve relative paths against the rule's base path or the cwd."""
    path = Path(rule.file_path).expanduser()
    if not path.is_absolute():
        path = Path(rule.base_path or os.getcwd()) / path
    return Path(os.path.normpath(path))


def _check_type(resolved: Path, rule: FileValidationRule) -> ValidationIssue | None:
    if rule.expected_type == FileExpectedType.file and not resolved.is_file():
        return create_issue(
            "NOT_A_FILE",
            f'"{rule.display_name}" is not a regular file.',
            field=rule.file_path,
            suggestion="Provide a path to a file, not a directory.",
        )
    if rule.expected_type == FileExpectedType.directory and not resolved.is_dir():
        return create_issue(
            "NOT_A_DIRECTORY",
            f'"{rule.display_name}" is not a directory.',
            field=rule.file_path,
            suggestion="Provide a path to a directory.",
        )
    return None


def _check_extension(resolved: Path, rule: FileValidationRule) -> ValidationIssue | None:
    if not rule.allowed_extensions:
        return None
    ext = resolved.suffix.lower()
    if ext in {e.lower() for e in rule.allowed_extensions}:
        return None
    allowed = ", ".join(rule.allowed_extensions)
    return create_issue(
        "INVALID_FILE_EXTENSION",
        f'Invalid file type "{ext}" for "{rule.display_name}".',
        field=rule.file_path,
        received_value=ext or "(no extension)",
        expected_value=allowed,
        suggestion=f"Allowed file types: {allowed}",
    )


def _check_permissions(resolved: Path, rule: FileValidationRule) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    for perm in rule.permissions:
        if os.access(resolved, PERMISSION_MODES[perm]):
            continue
        issues.append(
            create_issue(
                "INSUFFICIENT_PERMISSION",
                f'Insufficient {perm.value} permission for "{rule.display_name}".',
                field=rule.file_path,
                suggestion=f"Grant {perm.value} permission to: {resolved}",
            )
        )
    return issues


def validate_file_path(
    rule: FileValidationRule,
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Validate a single file path.

    An empty path or (with ``must_exist``) a missing path is reported on its
    own; the type, extension and permission checks need an existing entry.
    """
    log = log or logger
    log.debug("Validating file: %s", rule.display_name)

    if not rule.file_path or not rule.file_path.strip():
        return build_result([
            create_issue(
                "EMPTY_PATH",
                f'File path is empty for "{rule.display_name}".',
                field=rule.file_path,
                suggestion="Provide a valid file path.",
            )
        ])

    resolved = resolve_file_path(rule)
    exists = resolved.exists()

    if rule.must_exist and not exists:
        log.warning("File not found: %s (resolved: %s)", rule.display_name, resolved)
        return build_result([
            create_issue(
                "FILE_NOT_FOUND",
                f'File not found: "{rule.display_name}" (resolved: {resolved})',
                field=rule.file_path,
                suggestion=f"Ensure the file exists at: {resolved}",
            )
        ])

    issues: list[ValidationIssue] = []
    if exists:
        type_issue = _check_type(resolved, rule)
        if type_issue is not None:
            issues.append(type_issue)

    ext_issue = _check_extension(resolved, rule)
    if ext_issue is not None:
        issues.append(ext_issue)

    if exists:
        issues.extend(_check_permissions(resolved, rule))

    result = build_result(issues)
    if result.valid:
        log.debug("%s is valid", rule.display_name)
    else:
        log.warning("%s has %d issue(s)", rule.display_name, len(result.errors))
    return result


def validate_file_paths(
    rules: list[FileValidationRule],
    log: logging.Logger | None = None,
) -> ValidationResult:
    """Validate several rules independently and concatenate their issues."""
    issues: list[ValidationIssue] = []
    for rule in rules:
        issues.extend(validate_file_path(rule, log).issues)
    return build_result(issues)
