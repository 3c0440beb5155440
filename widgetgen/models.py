"""Core data models shared across widgetgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FileMatch:
    """A file that satisfied a FilePattern.

    ``captured_name`` is only set when the matching name was a wildcard
    template, e.g. ``button`` for ``button.transformer.tsx`` against
    ``*.transformer``.
    """

    file_name: str
    captured_name: Optional[str] = None


@dataclass
class ComponentValidation:
    """Result of checking one file for a primary export marker."""

    has_primary_export: bool
    file_path: Path
    warnings: List[str] = field(default_factory=list)
    read_error: Optional[str] = None


@dataclass(frozen=True)
class ValidationIssue:
    """Structured form of a validation error or warning."""

    file: str
    kind: str
    severity: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "file": self.file,
            "kind": self.kind,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Validation outcome for a single component directory."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    entry_validation: Optional[ComponentValidation] = None
    transform_validation: Optional[ComponentValidation] = None
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str, *, file: str = "entry", kind: str = "other") -> None:
        self.errors.append(message)
        self.issues.append(ValidationIssue(file=file, kind=kind, severity="error", message=message))

    def add_warning(self, message: str, *, file: str, kind: str = "other") -> None:
        self.warnings.append(message)
        self.issues.append(ValidationIssue(file=file, kind=kind, severity="warn", message=message))


@dataclass(frozen=True)
class ComponentInfo:
    """A discovered widget directory that passed validation."""

    name: str
    entry_file_path: Path
    validation: ValidationResult
    transform_file_path: Optional[Path] = None


@dataclass
class ScanResult:
    """Everything a single scan of the components directory produced."""

    components: List[ComponentInfo] = field(default_factory=list)
    skipped_directory_names: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    skipped: Dict[str, ValidationResult] = field(default_factory=dict)
    root_directory: Optional[Path] = None


@dataclass
class ComponentStatus:
    """Per-component entry of a ValidationReport."""

    path: str
    status: str
    issues: List[ValidationIssue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ReportSummary:
    total: int = 0
    valid: int = 0
    with_warnings: int = 0
    with_errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "valid": self.valid,
            "with_warnings": self.with_warnings,
            "with_errors": self.with_errors,
        }


@dataclass
class ValidationReport:
    """User-facing projection of a ScanResult."""

    timestamp: str
    components: Dict[str, ComponentStatus] = field(default_factory=dict)
    summary: ReportSummary = field(default_factory=ReportSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "components": {name: info.to_dict() for name, info in self.components.items()},
            "summary": self.summary.to_dict(),
        }


__all__ = [
    "ComponentInfo",
    "ComponentStatus",
    "ComponentValidation",
    "FileMatch",
    "ReportSummary",
    "ScanResult",
    "ValidationIssue",
    "ValidationReport",
    "ValidationResult",
]
