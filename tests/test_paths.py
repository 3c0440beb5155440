"""Tests for widgetgen.paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from widgetgen.config import CodegenConfig
from widgetgen.models import ComponentInfo, ValidationResult
from widgetgen.paths import (
    PathUtils,
    ensure_absolute,
    ensure_parent_directory,
    strip_extension,
    to_module_specifier,
)


def _config(root: Path, output: Path) -> CodegenConfig:
    return CodegenConfig(root_directory=root, output_file=output)


def _component(entry: Path, transform: Path | None = None) -> ComponentInfo:
    return ComponentInfo(
        name=entry.parent.name,
        entry_file_path=entry,
        transform_file_path=transform,
        validation=ValidationResult(),
    )


def test_ensure_absolute_anchors_relative_paths(tmp_path: Path) -> None:
    assert ensure_absolute("src/components", tmp_path) == tmp_path / "src" / "components"
    assert ensure_absolute(tmp_path / "abs", Path("/ignored")) == tmp_path / "abs"


def test_strip_extension_removes_only_last_suffix() -> None:
    assert strip_extension("../components/button/button.transformer.tsx") == "../components/button/button.transformer"
    assert strip_extension("../components/button") == "../components/button"


def test_to_module_specifier_prefixes_bare_paths() -> None:
    assert to_module_specifier("components/button") == "./components/button"
    assert to_module_specifier("../components/button") == "../components/button"


def test_entry_import_uses_directory_for_index_files(tmp_path: Path) -> None:
    src = tmp_path / "src"
    utils = PathUtils(_config(src / "components", src / "generated" / "componentRegistry.ts"))

    component = _component(src / "components" / "button" / "index.tsx")

    assert utils.entry_import_path(component) == "../components/button"


def test_entry_import_uses_file_for_named_entries(tmp_path: Path) -> None:
    src = tmp_path / "src"
    utils = PathUtils(_config(src / "components", src / "generated" / "componentRegistry.ts"))

    component = _component(src / "components" / "button" / "Button.tsx")

    assert utils.entry_import_path(component) == "../components/button/Button"


def test_transform_import_path_is_relative_to_output(tmp_path: Path) -> None:
    src = tmp_path / "src"
    utils = PathUtils(_config(src / "components", src / "registry.ts"))
    component = _component(
        src / "components" / "icon" / "index.tsx",
        src / "components" / "icon" / "icon.transformer.tsx",
    )

    assert utils.transform_import_path(component) == "./components/icon/icon.transformer"


def test_transform_import_path_requires_transform(tmp_path: Path) -> None:
    utils = PathUtils(_config(tmp_path, tmp_path / "registry.ts"))

    with pytest.raises(ValueError):
        utils.transform_import_path(_component(tmp_path / "menu" / "index.tsx"))


def test_ensure_parent_directory_creates_ancestors(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "c" / "registry.ts"

    ensure_parent_directory(target)

    assert target.parent.is_dir()
