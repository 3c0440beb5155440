"""Component directory scanning and structural validation."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .classifiers import ExportClassifier, get_classifier
from .config import CodegenConfig, FilePattern
from .errors import ScanError
from .logging import get_logger
from .models import ComponentInfo, ComponentValidation, FileMatch, ScanResult, ValidationResult
from .template import capitalize_component_name

# Directory names become TypeScript bindings (``Button``, ``buttonTransformer``).
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


@lru_cache(maxsize=128)
def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a glob-like name template to an anchored regular expression.

    ``*`` becomes a non-greedy capturing group and ``?`` matches one
    character; everything else is matched literally::

        "*.transformer" -> ^(.+?)\\.transformer$
    """
    parts: List[str] = []
    for char in pattern:
        if char == "*":
            parts.append("(.+?)")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("^" + "".join(parts) + "$")


def match_file(file_name: str, pattern: FilePattern) -> Optional[FileMatch]:
    """Match ``file_name`` against ``pattern``: extension first, then basename."""
    dot = file_name.rfind(".")
    if dot <= 0:
        return None
    extension = file_name[dot:]
    if extension not in pattern.extensions:
        return None

    base_name = file_name[:dot]
    for name in pattern.names:
        if "*" in name:
            match = glob_to_regex(name).match(base_name)
            if match:
                captured = match.group(1) if match.groups() else None
                return FileMatch(file_name=file_name, captured_name=captured)
        elif base_name == name:
            return FileMatch(file_name=file_name)
    return None


def find_matching_file(files: Sequence[str], pattern: FilePattern) -> Optional[FileMatch]:
    for file_name in files:
        match = match_file(file_name, pattern)
        if match is not None:
            return match
    return None


def find_all_matching_files(files: Sequence[str], pattern: FilePattern) -> List[FileMatch]:
    matches: List[FileMatch] = []
    for file_name in files:
        match = match_file(file_name, pattern)
        if match is not None:
            matches.append(match)
    return matches


class Scanner:
    """Walks the components root one level deep and validates each directory."""

    def __init__(self, config: CodegenConfig, classifier: ExportClassifier | None = None) -> None:
        self.config = config
        self.classifier = classifier or get_classifier(config.export_classifier)
        self.logger = get_logger("scanner")

    def scan(self) -> ScanResult:
        """Return a fresh ScanResult for the configured root directory."""
        root = self.config.root_directory
        result = ScanResult(root_directory=root)
        # Generated binding -> directory that claimed it.
        bindings: Dict[str, str] = {}

        for name, directory in self._list_directories(root):
            files = self._list_files(directory)
            validation = ValidationResult()
            component = self._inspect_directory(name, directory, files, validation)
            if component is not None and not self._claim_bindings(component, bindings, validation):
                component = None

            if component is None:
                result.skipped_directory_names.append(name)
                result.warnings.extend(validation.errors)
                result.skipped[name] = validation
                for error in validation.errors:
                    self.logger.warning("Skipping %s: %s", name, error)
                continue

            for warning in validation.warnings:
                self.logger.warning(warning)
            self.logger.debug(
                "Discovered component %s (entry=%s, transform=%s)",
                name,
                component.entry_file_path.name,
                component.transform_file_path.name if component.transform_file_path else None,
            )
            result.components.append(component)

        return result

    def _claim_bindings(
        self, component: ComponentInfo, bindings: Dict[str, str], validation: ValidationResult
    ) -> bool:
        names = [capitalize_component_name(component.name)]
        if component.transform_file_path is not None:
            names.append(f"{component.name}Transformer")

        for binding in names:
            owner = bindings.get(binding)
            if owner is not None:
                validation.add_error(
                    f"Component directory '{component.name}' collides with '{owner}': "
                    f"both generate the binding '{binding}'",
                    file="entry",
                    kind="duplicate_name",
                )
                return False

        for binding in names:
            bindings[binding] = component.name
        return True

    def _list_directories(self, root: Path) -> List[tuple[str, Path]]:
        try:
            with os.scandir(root) as iterator:
                entries = [(entry.name, Path(entry.path)) for entry in iterator if entry.is_dir()]
        except OSError as exc:
            raise ScanError(f"Error scanning component directory {root}: {exc}") from exc
        return sorted(entries, key=lambda item: item[0])

    def _list_files(self, directory: Path) -> List[str]:
        try:
            with os.scandir(directory) as iterator:
                names = [entry.name for entry in iterator if entry.is_file()]
        except OSError as exc:
            raise ScanError(f"Error scanning component directory {directory}: {exc}") from exc
        return sorted(names)

    def _inspect_directory(
        self,
        name: str,
        directory: Path,
        files: Sequence[str],
        validation: ValidationResult,
    ) -> Optional[ComponentInfo]:
        patterns = self.config.file_patterns

        entry = find_matching_file(files, patterns.entry)
        if entry is None:
            examples = " or ".join(patterns.entry.examples())
            validation.add_error(
                f"Missing required file: {examples} in {directory}",
                file="entry",
                kind="missing_file",
            )
            return None

        if not _IDENTIFIER_PATTERN.match(name):
            validation.add_error(
                f"Invalid component directory name '{name}' in {directory.parent}: "
                "names must start with an ASCII letter, '_' or '$' and contain only "
                "ASCII letters, digits, '_' or '$'",
                file="entry",
                kind="invalid_name",
            )
            return None

        entry_path = directory / entry.file_name
        validation.entry_validation = self._validate_export(entry_path, validation, file="entry")
        transform_path = self._validate_transforms(directory, files, validation)

        return ComponentInfo(
            name=name,
            entry_file_path=entry_path,
            transform_file_path=transform_path,
            validation=validation,
        )

    def _validate_transforms(
        self,
        directory: Path,
        files: Sequence[str],
        validation: ValidationResult,
    ) -> Optional[Path]:
        pattern = self.config.file_patterns.transform
        transform_files = [match.file_name for match in find_all_matching_files(files, pattern)]
        if not transform_files:
            return None

        if len(transform_files) > 1:
            validation.add_warning(
                f"Multiple transform files found in {directory}: {', '.join(transform_files)}",
                file="transform",
                kind="multiple_transforms",
            )

        if len(transform_files) == 1:
            validation.transform_validation = self._validate_export(
                directory / transform_files[0], validation, file="transform"
            )

        return directory / transform_files[0]

    def _validate_export(
        self, file_path: Path, validation: ValidationResult, *, file: str
    ) -> ComponentValidation:
        checked = self.check_primary_export(file_path)
        kind = "unreadable_file" if checked.read_error is not None else "missing_export"
        for warning in checked.warnings:
            validation.add_warning(warning, file=file, kind=kind)
        return checked

    def check_primary_export(self, file_path: Path) -> ComponentValidation:
        """Classify a single file; read failures become warnings, not exceptions."""
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return ComponentValidation(
                has_primary_export=False,
                file_path=file_path,
                warnings=[f"Could not read file {file_path}: {exc}"],
                read_error=str(exc),
            )

        has_export = self.classifier.has_primary_export(source)
        return ComponentValidation(
            has_primary_export=has_export,
            file_path=file_path,
            warnings=[] if has_export else [f"Missing default export in {file_path}"],
        )


__all__ = [
    "Scanner",
    "find_all_matching_files",
    "find_matching_file",
    "glob_to_regex",
    "match_file",
]
