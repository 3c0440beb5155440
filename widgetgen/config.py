"""Configuration loading for widgetgen (.widgetgenrc, pyproject.toml, ...)."""

from __future__ import annotations

import json
import runpy
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError
from .paths import ensure_absolute

CONFIG_NAME = "widgetgen"

# Searched in order inside the working directory; the first usable hit wins.
SEARCH_PLACES: tuple[str, ...] = (
    "package.json",
    f".{CONFIG_NAME}rc",
    f".{CONFIG_NAME}rc.json",
    f".{CONFIG_NAME}rc.yaml",
    f".{CONFIG_NAME}rc.yml",
    f"{CONFIG_NAME}.config.py",
    "pyproject.toml",
)


@dataclass(frozen=True)
class RegistryPreset:
    """Default import path and binding name for a DI registry style."""

    import_path: str
    import_name: str


REGISTRY_PRESETS: Dict[str, RegistryPreset] = {
    "inversify": RegistryPreset(import_path="./widgetRegistry", import_name="widgetRegistryInversify"),
    "tsyringe": RegistryPreset(import_path="./widgetRegistry", import_name="widgetRegistryTsyringe"),
}

DEFAULT_REGISTRY_TYPE = "inversify"


@dataclass
class FilePattern:
    """Candidate basenames (exact or ``*`` templates) plus allowed extensions."""

    names: List[str]
    extensions: List[str]

    def examples(self) -> List[str]:
        """Return every name/extension combination, e.g. ``index.tsx``."""
        return [f"{name}{extension}" for name in self.names for extension in self.extensions]


@dataclass
class ComponentFilePatterns:
    """Patterns for the required entry file and the optional transform file."""

    entry: FilePattern = field(default_factory=lambda: FilePattern(names=["index"], extensions=[".tsx"]))
    transform: FilePattern = field(
        default_factory=lambda: FilePattern(
            names=["transformer", "*.transformer"],
            extensions=[".ts", ".tsx"],
        )
    )


@dataclass
class RegistryConfig:
    """Registry preset selection with optional per-field overrides."""

    type: str = DEFAULT_REGISTRY_TYPE
    import_path: Optional[str] = None
    import_name: Optional[str] = None


@dataclass
class CodegenConfig:
    """Fully resolved settings for a scan/generate run."""

    root_directory: Path
    output_file: Path
    file_patterns: ComponentFilePatterns = field(default_factory=ComponentFilePatterns)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    export_classifier: str = "regex"
    config_file: Optional[Path] = None


@dataclass
class ConfigOverrides:
    """Explicit settings (CLI flags, service payloads) that win over any file."""

    components_dir: Optional[str] = None
    output_file: Optional[str] = None
    registry_type: Optional[str] = None
    import_path: Optional[str] = None
    import_name: Optional[str] = None
    export_classifier: Optional[str] = None


def default_config() -> CodegenConfig:
    """Return built-in defaults with paths still relative to the working directory."""
    return CodegenConfig(
        root_directory=Path("src/components"),
        output_file=Path("src/generated/componentRegistry.ts"),
    )


def load_config(
    cwd: Path | str | None = None,
    *,
    config_path: Path | str | None = None,
    overrides: ConfigOverrides | None = None,
) -> CodegenConfig:
    """Resolve configuration as defaults <- config file <- overrides.

    Relative ``componentsDir``/``outputFile`` values are anchored at ``cwd``.
    A missing config file is not an error; an unreadable or malformed one is.
    """
    base_dir = Path(cwd).expanduser().resolve() if cwd is not None else Path.cwd()
    config = default_config()

    if config_path is not None:
        explicit = ensure_absolute(Path(config_path).expanduser(), base_dir)
        if not explicit.is_file():
            raise ConfigError(f"Configuration file not found: {explicit}")
        data = _load_candidate(explicit)
        if data is None:
            raise ConfigError(f"{explicit.name} does not contain a '{CONFIG_NAME}' section")
        config = merge_config(config, data, source=explicit)
    else:
        discovered = _discover(base_dir)
        if discovered is not None:
            source, data = discovered
            config = merge_config(config, data, source=source)

    if overrides is not None:
        config = apply_overrides(config, overrides)

    return replace(
        config,
        root_directory=ensure_absolute(config.root_directory, base_dir),
        output_file=ensure_absolute(config.output_file, base_dir),
    )


def merge_config(base: CodegenConfig, data: Mapping[str, Any], *, source: Path) -> CodegenConfig:
    """Layer a parsed config mapping over ``base`` and return a new config."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"{source.name} must contain a mapping at the root")

    components_dir = _as_str(_first(data, "componentsDir", "components_dir"))
    output_file = _as_str(_first(data, "outputFile", "output_file"))

    patterns_data = _first(data, "filePatterns", "file_patterns")
    if patterns_data is not None and not isinstance(patterns_data, Mapping):
        raise ConfigError(f"{source.name}: filePatterns must be a mapping")
    patterns_data = patterns_data or {}
    file_patterns = ComponentFilePatterns(
        entry=_merge_pattern(
            base.file_patterns.entry,
            _first(patterns_data, "entry", "index"),
            label="entry",
            source=source,
        ),
        transform=_merge_pattern(
            base.file_patterns.transform,
            _first(patterns_data, "transform", "transformer"),
            label="transform",
            source=source,
        ),
    )

    registry = base.registry
    registry_data = data.get("registry")
    if registry_data is not None:
        if not isinstance(registry_data, Mapping):
            raise ConfigError(f"{source.name}: registry must be a mapping")
        registry = RegistryConfig(
            type=_as_str(registry_data.get("type")) or registry.type,
            import_path=_as_str(_first(registry_data, "importPath", "import_path")) or registry.import_path,
            import_name=_as_str(_first(registry_data, "importName", "import_name")) or registry.import_name,
        )
        _check_registry_type(registry.type, source=source.name)

    classifier = _as_str(_first(data, "exportClassifier", "export_classifier"))

    return replace(
        base,
        root_directory=Path(components_dir) if components_dir else base.root_directory,
        output_file=Path(output_file) if output_file else base.output_file,
        file_patterns=file_patterns,
        registry=registry,
        export_classifier=classifier or base.export_classifier,
        config_file=source,
    )


def apply_overrides(base: CodegenConfig, overrides: ConfigOverrides) -> CodegenConfig:
    """Apply explicit overrides field by field; unset fields keep ``base``."""
    registry = base.registry
    if any((overrides.registry_type, overrides.import_path, overrides.import_name)):
        registry = RegistryConfig(
            type=overrides.registry_type or registry.type,
            import_path=overrides.import_path or registry.import_path,
            import_name=overrides.import_name or registry.import_name,
        )
        _check_registry_type(registry.type, source="overrides")

    return replace(
        base,
        root_directory=Path(overrides.components_dir) if overrides.components_dir else base.root_directory,
        output_file=Path(overrides.output_file) if overrides.output_file else base.output_file,
        registry=registry,
        export_classifier=overrides.export_classifier or base.export_classifier,
    )


def resolve_registry(config: CodegenConfig) -> RegistryPreset:
    """Return the effective registry import, overrides first, preset second."""
    registry = config.registry
    _check_registry_type(registry.type, source="config")
    preset = REGISTRY_PRESETS[registry.type]
    return RegistryPreset(
        import_path=registry.import_path or preset.import_path,
        import_name=registry.import_name or preset.import_name,
    )


def _discover(base_dir: Path) -> tuple[Path, Dict[str, Any]] | None:
    for place in SEARCH_PLACES:
        candidate = base_dir / place
        if not candidate.is_file():
            continue
        data = _load_candidate(candidate)
        if data is not None:
            return candidate, data
    return None


def _load_candidate(path: Path) -> Dict[str, Any] | None:
    """Parse ``path``; None means the file holds no widgetgen section."""
    name = path.name
    if name == "package.json":
        section = _read_json(path).get(CONFIG_NAME)
        return _section_or_none(section, path)
    if name == "pyproject.toml":
        section = _tool_table(_read_toml(path), path).get(CONFIG_NAME)
        return _section_or_none(section, path)
    if path.suffix == ".toml":
        table = _read_toml(path)
        return _section_or_none(_tool_table(table, path).get(CONFIG_NAME, table), path)
    if path.suffix == ".py":
        return _run_config_script(path)
    if path.suffix == ".json":
        return _read_json(path)
    return _read_yaml(path)


def _section_or_none(section: Any, path: Path) -> Dict[str, Any] | None:
    if section is None:
        return None
    if not isinstance(section, dict):
        raise ConfigError(f"{path.name}: '{CONFIG_NAME}' section must be a mapping")
    return section


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc


def _tool_table(table: Mapping[str, Any], path: Path) -> Mapping[str, Any]:
    tool = table.get("tool", {})
    if not isinstance(tool, Mapping):
        raise ConfigError(f"{path.name}: 'tool' must be a table")
    return tool


def _read_json(path: Path) -> Dict[str, Any]:
    text = _read_text(path)
    if not text.strip():
        return {}
    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return _as_mapping(loaded, path)


def _read_yaml(path: Path) -> Dict[str, Any]:
    text = _read_text(path)
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return _as_mapping(loaded or {}, path)


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        return tomllib.loads(_read_text(path))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc


def _run_config_script(path: Path) -> Dict[str, Any]:
    try:
        namespace = runpy.run_path(str(path))
    except Exception as exc:
        raise ConfigError(f"Failed to load {path.name}: {exc}") from exc
    exported = namespace.get("config", namespace.get("default"))
    if exported is None:
        raise ConfigError(f"{path.name} must define a 'config' mapping")
    return _as_mapping(exported, path)


def _as_mapping(value: Any, path: Path) -> Dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return dict(value)


def _merge_pattern(base: FilePattern, value: Any, *, label: str, source: Path) -> FilePattern:
    if value is None:
        return base
    if not isinstance(value, Mapping):
        raise ConfigError(f"{source.name}: filePatterns.{label} must be a mapping")

    names_value = _first(value, "names", "name")
    extensions_value = value.get("extensions")
    pattern = FilePattern(
        names=_as_str_list(names_value) if names_value is not None else list(base.names),
        extensions=(
            [_normalize_extension(ext) for ext in _as_str_list(extensions_value)]
            if extensions_value is not None
            else list(base.extensions)
        ),
    )

    if not pattern.names:
        raise ConfigError(f"{source.name}: filePatterns.{label} needs at least one name")
    if not pattern.extensions:
        raise ConfigError(f"{source.name}: filePatterns.{label} needs at least one extension")
    for name in pattern.names:
        if name.count("*") > 1:
            raise ConfigError(
                f"{source.name}: filePatterns.{label} name '{name}' may contain at most one '*'"
            )
    return pattern


def _check_registry_type(registry_type: str, *, source: str) -> None:
    if registry_type not in REGISTRY_PRESETS:
        known = ", ".join(sorted(REGISTRY_PRESETS))
        raise ConfigError(f"{source}: unknown registry type '{registry_type}' (expected one of: {known})")


def _normalize_extension(extension: str) -> str:
    extension = extension.strip()
    return extension if extension.startswith(".") else f".{extension}"


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_NAME",
    "REGISTRY_PRESETS",
    "SEARCH_PLACES",
    "CodegenConfig",
    "ComponentFilePatterns",
    "ConfigError",
    "ConfigOverrides",
    "FilePattern",
    "RegistryConfig",
    "RegistryPreset",
    "apply_overrides",
    "default_config",
    "load_config",
    "merge_config",
    "resolve_registry",
]
