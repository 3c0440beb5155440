"""Projection of scan results into a user-facing validation report."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Iterable, Optional

from .models import ComponentStatus, ReportSummary, ScanResult, ValidationIssue, ValidationReport
from .template import format_timestamp


def component_status(issues: Iterable[ValidationIssue]) -> str:
    """``error`` beats ``warning`` beats ``valid``."""
    severities = {issue.severity for issue in issues}
    if "error" in severities:
        return "error"
    if "warn" in severities:
        return "warning"
    return "valid"


def build_report(scan_result: ScanResult, *, timestamp: Optional[datetime] = None) -> ValidationReport:
    """Summarise every scanned directory, including the ones that were skipped."""
    report = ValidationReport(timestamp=format_timestamp(timestamp or datetime.now(UTC)))

    for component in scan_result.components:
        issues = list(component.validation.issues)
        report.components[component.name] = ComponentStatus(
            path=str(component.entry_file_path),
            status=component_status(issues),
            issues=issues,
        )

    root = scan_result.root_directory
    for name in scan_result.skipped_directory_names:
        validation = scan_result.skipped.get(name)
        issues = list(validation.issues) if validation is not None else []
        report.components[name] = ComponentStatus(
            path=str(root / name) if root is not None else name,
            status="error",
            issues=issues,
        )

    report.summary = summarize(report.components.values())
    return report


def summarize(statuses: Iterable[ComponentStatus]) -> ReportSummary:
    summary = ReportSummary()
    for info in statuses:
        summary.total += 1
        if info.status == "valid":
            summary.valid += 1
        elif info.status == "warning":
            summary.with_warnings += 1
        else:
            summary.with_errors += 1
    return summary


__all__ = ["build_report", "component_status", "summarize"]
