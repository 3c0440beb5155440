"""Tests for widgetgen.scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.widget_builder import WidgetTreeBuilder
from widgetgen.config import CodegenConfig, FilePattern
from widgetgen.errors import ErrorKind, ScanError
from widgetgen.scanner import Scanner, find_matching_file, glob_to_regex, match_file

TRANSFORM = FilePattern(names=["*.transform"], extensions=[".tsx"])


def test_wildcard_pattern_captures_name() -> None:
    match = find_matching_file(["button.transform.tsx", "index.tsx"], TRANSFORM)

    assert match is not None
    assert match.file_name == "button.transform.tsx"
    assert match.captured_name == "button"


def test_exact_pattern_requires_equal_basename() -> None:
    pattern = FilePattern(names=["transform"], extensions=[".tsx"])

    assert find_matching_file(["button.transform.tsx", "index.tsx"], pattern) is None


def test_extension_is_checked_before_basename() -> None:
    pattern = FilePattern(names=["index"], extensions=[".tsx"])

    assert match_file("index.ts", pattern) is None
    assert match_file("index", pattern) is None
    assert match_file("index.tsx", pattern) is not None


def test_matching_is_case_sensitive() -> None:
    pattern = FilePattern(names=["index"], extensions=[".tsx"])

    assert match_file("Index.tsx", pattern) is None


def test_first_pattern_wins() -> None:
    pattern = FilePattern(names=["*.transformer", "*"], extensions=[".ts"])

    match = match_file("card.transformer.ts", pattern)

    assert match is not None
    assert match.captured_name == "card"


def test_glob_to_regex_escapes_metacharacters() -> None:
    regex = glob_to_regex("a+b.*")

    assert regex.match("a+b.widget")
    assert not regex.match("aab.widget")
    assert glob_to_regex("item?").match("item1")
    assert not glob_to_regex("item?").match("item12")


def test_scan_discovers_components_in_listing_order(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("menu")
    widget_tree.component("button", transform="button.transformer.tsx")
    widget_tree.component("icon", transform="transformer.ts")
    widget_tree.write({"README.md": "# not a component\n"})

    result = widget_tree.scan()

    assert [component.name for component in result.components] == ["button", "icon", "menu"]
    assert result.skipped_directory_names == []

    button = result.components[0]
    assert button.entry_file_path == widget_tree.components_dir / "button" / "index.tsx"
    assert button.transform_file_path == widget_tree.components_dir / "button" / "button.transformer.tsx"
    assert button.validation.is_valid
    assert button.validation.warnings == []
    assert result.components[2].transform_file_path is None


def test_directory_without_entry_is_skipped(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("button")
    widget_tree.write({"broken/helper.ts": "export const x = 1;\n"})

    result = widget_tree.scan()

    assert [component.name for component in result.components] == ["button"]
    assert result.skipped_directory_names == ["broken"]
    assert len(result.warnings) == 1
    assert "Missing required file: index.tsx" in result.warnings[0]
    skipped = result.skipped["broken"]
    assert not skipped.is_valid
    assert skipped.issues[0].kind == "missing_file"
    assert skipped.issues[0].severity == "error"


def test_nested_directories_are_not_scanned(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.write({"group/nested/index.tsx": "export default function A() {}\n"})

    result = widget_tree.scan()

    assert result.components == []
    assert result.skipped_directory_names == ["group"]


def test_missing_primary_export_is_a_warning(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("text", entry="export function Text() {\n  return null;\n}\n")

    result = widget_tree.scan()

    assert len(result.components) == 1
    validation = result.components[0].validation
    assert validation.is_valid
    assert validation.entry_validation is not None
    assert validation.entry_validation.has_primary_export is False
    assert len(validation.warnings) == 1
    assert validation.warnings[0].startswith("Missing default export in")
    assert validation.issues[0].kind == "missing_export"


def test_reexport_counts_as_primary_export(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("link", entry="function Link() {}\nexport { Link as default };\n")

    result = widget_tree.scan()

    entry_validation = result.components[0].validation.entry_validation
    assert entry_validation is not None
    assert entry_validation.has_primary_export is True


def test_multiple_transform_files_warn_and_first_wins(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.write(
        {
            "button/index.tsx": "export default function Button() {}\n",
            "button/transform.tsx": "export default (p) => p;\n",
            "button/extra.transform.tsx": "export default (p) => p;\n",
        }
    )
    config = widget_tree.config()
    config.file_patterns.transform = FilePattern(names=["transform", "*.transform"], extensions=[".tsx"])

    result = Scanner(config).scan()

    component = result.components[0]
    assert component.validation.is_valid
    assert any("multiple transform files" in warning.lower() for warning in component.validation.warnings)
    assert component.transform_file_path == widget_tree.components_dir / "button" / "extra.transform.tsx"
    # ambiguous transforms are not export-checked
    assert component.validation.transform_validation is None


def test_transform_without_default_export_is_flagged(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.write(
        {
            "icon/index.tsx": "export default function Icon() {}\n",
            "icon/transformer.ts": "export const transformer = (p) => p;\n",
        }
    )

    result = widget_tree.scan()

    validation = result.components[0].validation
    assert validation.transform_validation is not None
    assert validation.transform_validation.has_primary_export is False
    assert validation.issues[-1].file == "transform"


def test_invalid_component_name_is_skipped(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("1column")
    widget_tree.component("my-widget")
    widget_tree.component("card")

    result = widget_tree.scan()

    assert [component.name for component in result.components] == ["card"]
    assert result.skipped_directory_names == ["1column", "my-widget"]
    assert result.skipped["1column"].issues[0].kind == "invalid_name"


def test_names_colliding_after_capitalization_are_skipped(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("button")
    widget_tree.component("Button")

    result = widget_tree.scan()

    # Uppercase sorts first, so "Button" claims the binding.
    assert [component.name for component in result.components] == ["Button"]
    assert result.skipped_directory_names == ["button"]
    issue = result.skipped["button"].issues[-1]
    assert issue.kind == "duplicate_name"
    assert issue.severity == "error"
    assert "'Button'" in issue.message


def test_transform_binding_collision_is_skipped(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("card", transform="transformer.ts")
    widget_tree.component("cardTransformer")

    result = widget_tree.scan()

    assert [component.name for component in result.components] == ["card"]
    assert result.skipped["cardTransformer"].issues[-1].kind == "duplicate_name"


def test_transform_with_unlisted_extension_is_ignored(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("menu")
    widget_tree.write({"menu/transformer.js": "export default (p) => p;\n"})

    result = widget_tree.scan()

    component = result.components[0]
    assert component.transform_file_path is None
    assert component.validation.warnings == []


def test_unreadable_file_becomes_warning(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("menu")
    (widget_tree.components_dir / "menu" / "index.tsx").write_bytes(b"\xff\xfe\x00bad")

    result = widget_tree.scan()

    validation = result.components[0].validation
    assert validation.is_valid
    assert validation.warnings[0].startswith("Could not read file")
    assert validation.issues[0].kind == "unreadable_file"


def test_wildcard_entry_pattern_is_supported(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.write({"card/card.widget.tsx": "export default function Card() {}\n"})
    config = widget_tree.config()
    config.file_patterns.entry = FilePattern(names=["*.widget"], extensions=[".tsx"])

    result = Scanner(config).scan()

    assert result.components[0].entry_file_path.name == "card.widget.tsx"


def test_missing_root_raises_scan_error(tmp_path: Path) -> None:
    config = CodegenConfig(root_directory=tmp_path / "missing", output_file=tmp_path / "out.ts")

    with pytest.raises(ScanError) as excinfo:
        Scanner(config).scan()

    assert excinfo.value.kind is ErrorKind.SCAN
    assert str(tmp_path / "missing") in str(excinfo.value)


def test_each_scan_returns_a_fresh_result(widget_tree: WidgetTreeBuilder) -> None:
    widget_tree.component("button")
    scanner = Scanner(widget_tree.config())

    first = scanner.scan()
    widget_tree.component("icon")
    second = scanner.scan()

    assert [c.name for c in first.components] == ["button"]
    assert [c.name for c in second.components] == ["button", "icon"]
