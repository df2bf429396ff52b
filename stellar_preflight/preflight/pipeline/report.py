"""Plain-text rendering of a pre-flight report for a console or output panel."""

from __future__ import annotations

from preflight.pipeline.models import CheckStatus, PreFlightReport
from preflight.validator.models import ValidationSeverity

RULE = "─" * 50

STATUS_ICONS = {
    CheckStatus.passed: "✔",
    CheckStatus.failed: "✘",
    CheckStatus.warning: "⚠",
    CheckStatus.skipped: "⊘",
}

SEVERITY_ICONS = {
    ValidationSeverity.error: "✘",
    ValidationSeverity.warning: "⚠",
    ValidationSeverity.info: "ℹ",
}


def format_preflight_report(report: PreFlightReport) -> str:
    """Render a report line by line.

    A check's own message is shown only when it did not pass; its nested
    issues are always listed. The command line is printed only after a
    successful dry run.
    """
    lines: list[str] = [f"Pre-Flight Report: {report.command}", RULE]

    for check in report.checks:
        time_str = f" ({check.duration_ms}ms)" if check.duration_ms > 0 else ""
        lines.append(f"{STATUS_ICONS[check.status]} {check.label}{time_str}")

        if check.message and check.status != CheckStatus.passed:
            lines.append(f"  {check.message}")

        for issue in check.issues or []:
            lines.append(f"  {SEVERITY_ICONS[issue.severity]} {issue.message}")
            if issue.suggestion:
                lines.append(f"    → {issue.suggestion}")

    lines.append(RULE)

    if report.passed:
        lines.append("✔ All validations passed.")
        if report.dry_run:
            lines.append("")
            lines.append("Dry run successful. Command would execute:")
            lines.append(f"  {report.resolved_command_line or f'stellar {report.command}'}")
    else:
        lines.append("✘ Pre-flight validation failed. Fix the issues above before running.")

    lines.append(f"Total time: {report.total_duration_ms}ms")
    return "\n".join(lines)
