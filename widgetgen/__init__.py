"""Component registry code generation for widget directories."""

from .codegen import Codegen, GenerationOutcome
from .config import (
    REGISTRY_PRESETS,
    CodegenConfig,
    ComponentFilePatterns,
    ConfigOverrides,
    FilePattern,
    RegistryConfig,
    load_config,
)
from .errors import CodegenError, ConfigError, ErrorKind, ScanError, WriteError
from .models import ComponentInfo, ScanResult, ValidationReport, ValidationResult
from .report import build_report
from .scanner import Scanner
from .template import TemplateGenerator

__all__ = [
    "REGISTRY_PRESETS",
    "Codegen",
    "CodegenConfig",
    "CodegenError",
    "ComponentFilePatterns",
    "ComponentInfo",
    "ConfigError",
    "ConfigOverrides",
    "ErrorKind",
    "FilePattern",
    "GenerationOutcome",
    "RegistryConfig",
    "ScanError",
    "ScanResult",
    "Scanner",
    "TemplateGenerator",
    "ValidationReport",
    "ValidationResult",
    "WriteError",
    "build_report",
    "load_config",
]
