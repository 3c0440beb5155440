"""Path helpers for building import specifiers in the generated registry."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .config import CodegenConfig
    from .models import ComponentInfo

_INDEX_STEM = "index"


def ensure_absolute(path: Path | str, cwd: Path | None = None) -> Path:
    """Anchor a relative path at ``cwd`` (default: the process working directory)."""
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate
    return (cwd or Path.cwd()) / candidate


def ensure_parent_directory(file_path: Path) -> None:
    """Create every missing ancestor directory of ``file_path``."""
    file_path.parent.mkdir(parents=True, exist_ok=True)


def strip_extension(specifier: str) -> str:
    path = PurePosixPath(specifier)
    if not path.suffix:
        return specifier
    return str(path.with_suffix(""))


def to_module_specifier(relative: str) -> str:
    """Turn a relative filesystem path into an ES module specifier."""
    posix = relative.replace(os.sep, "/")
    if posix.startswith("./") or posix.startswith("../") or posix in {".", ".."}:
        return posix
    return f"./{posix}"


class PathUtils:
    """Computes import paths relative to the generated output file."""

    def __init__(self, config: "CodegenConfig") -> None:
        self.output_dir = config.output_file.parent

    @staticmethod
    def relative_path(source: Path, target: Path) -> str:
        return os.path.relpath(target, source)

    def import_path(self, file_path: Path) -> str:
        """Return ``file_path`` as a module specifier without its extension."""
        relative = self.relative_path(self.output_dir, file_path)
        return to_module_specifier(strip_extension(relative.replace(os.sep, "/")))

    def entry_import_path(self, component: "ComponentInfo") -> str:
        # index files resolve through their directory
        entry = component.entry_file_path
        if entry.stem == _INDEX_STEM:
            return to_module_specifier(self.relative_path(self.output_dir, entry.parent))
        return self.import_path(entry)

    def transform_import_path(self, component: "ComponentInfo") -> str:
        if component.transform_file_path is None:
            raise ValueError(f"Component '{component.name}' has no transform file")
        return self.import_path(component.transform_file_path)


__all__ = [
    "PathUtils",
    "ensure_absolute",
    "ensure_parent_directory",
    "strip_extension",
    "to_module_specifier",
]
