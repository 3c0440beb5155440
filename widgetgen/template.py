"""Renders the generated component registry module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import List, Optional

from jinja2 import DictLoader, Environment, StrictUndefined

from .config import CodegenConfig, RegistryPreset, resolve_registry
from .models import ComponentInfo, ScanResult
from .paths import PathUtils

HEADER_MARKER = "// THIS FILE IS AUTO-GENERATED - DO NOT EDIT"
COMPONENT_WARNING = " // WARNING: Missing default export in component"
TRANSFORM_WARNING = " // WARNING: Missing default export in transformer"
IDENTITY_TRANSFORM = "  transformer: (props) => props, // No transformer file, using identity function"

_TEMPLATE_NAME = "registry.ts.j2"

# Every emitted line carries its own newline, so no whitespace control is needed.
_REGISTRY_TEMPLATE = (
    "{% for line in header %}{{ line }}\n{% endfor %}"
    "\n"
    "{{ registry_import }}\n"
    "\n"
    "{% for line in imports %}{{ line }}\n{% endfor %}"
    "\n"
    "{% for block in registrations %}{% for line in block %}{{ line }}\n{% endfor %}{% endfor %}"
)


@dataclass
class GeneratedTemplate:
    """Sections of the registry module before they are rendered."""

    header: List[str]
    registry_import: str
    imports: List[str] = field(default_factory=list)
    registrations: List[List[str]] = field(default_factory=list)


def capitalize_component_name(name: str) -> str:
    """Uppercase the first character only (``button`` -> ``Button``)."""
    return name[:1].upper() + name[1:]


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2025-06-19T00:30:59.916Z``."""
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class TemplateGenerator:
    """Turns a ScanResult into registry source text without touching the filesystem."""

    def __init__(self) -> None:
        self._env = Environment(
            loader=DictLoader({_TEMPLATE_NAME: _REGISTRY_TEMPLATE}),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(
        self,
        scan_result: ScanResult,
        config: CodegenConfig,
        *,
        generated_at: Optional[datetime] = None,
    ) -> str:
        template = self.build(scan_result, config, generated_at=generated_at)
        return self._env.get_template(_TEMPLATE_NAME).render(
            header=template.header,
            registry_import=template.registry_import,
            imports=template.imports,
            registrations=template.registrations,
        )

    def build(
        self,
        scan_result: ScanResult,
        config: CodegenConfig,
        *,
        generated_at: Optional[datetime] = None,
    ) -> GeneratedTemplate:
        registry = resolve_registry(config)
        path_utils = PathUtils(config)
        moment = generated_at or datetime.now(UTC)

        template = GeneratedTemplate(
            header=[HEADER_MARKER, f"// Generated on: {format_timestamp(moment)}"],
            registry_import=f'import {{ {registry.import_name} }} from "{registry.import_path}";',
        )
        for component in scan_result.components:
            template.imports.extend(self._imports_for(component, path_utils))
            template.registrations.append(self._registration_for(component, registry))
        return template

    def _imports_for(self, component: ComponentInfo, path_utils: PathUtils) -> List[str]:
        binding = capitalize_component_name(component.name)
        lines = [f'import {binding} from "{path_utils.entry_import_path(component)}";']
        if component.transform_file_path is not None:
            lines.append(
                f'import {component.name}Transformer from "{path_utils.transform_import_path(component)}";'
            )
        return lines

    def _registration_for(self, component: ComponentInfo, registry: RegistryPreset) -> List[str]:
        binding = capitalize_component_name(component.name)
        entry_validation = component.validation.entry_validation
        component_warning = (
            COMPONENT_WARNING
            if entry_validation is not None and not entry_validation.has_primary_export
            else ""
        )
        return [
            f'{registry.import_name}.registerComponent("{binding}", {{',
            f"  Component: {binding},{component_warning}",
            self._transform_line(component),
            "});",
        ]

    @staticmethod
    def _transform_line(component: ComponentInfo) -> str:
        if component.transform_file_path is None:
            return IDENTITY_TRANSFORM
        transform_validation = component.validation.transform_validation
        if transform_validation is not None and not transform_validation.has_primary_export:
            return f"  transformer: {component.name}Transformer,{TRANSFORM_WARNING}"
        return f"  transformer: {component.name}Transformer,"


__all__ = [
    "GeneratedTemplate",
    "TemplateGenerator",
    "capitalize_component_name",
    "format_timestamp",
]
