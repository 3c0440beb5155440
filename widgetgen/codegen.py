"""Pipeline orchestration for the generate and validate flows."""

from __future__ import annotations

import contextlib
import os
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Optional

from .config import CodegenConfig, ConfigOverrides, load_config
from .errors import CodegenError, ConfigError, ErrorKind, WriteError
from .logging import get_logger
from .models import ScanResult, ValidationReport
from .paths import ensure_parent_directory
from .report import build_report
from .scanner import Scanner
from .template import TemplateGenerator

_DEFAULT_FILE_MODE = 0o644


@dataclass
class GenerationOutcome:
    """Result of a successful ``generate`` run."""

    output_file: Path
    scan_result: ScanResult
    content: str


class Codegen:
    """Coordinates config -> scan -> {render + write, validation report}."""

    def __init__(
        self,
        config: CodegenConfig,
        scanner: Scanner | None = None,
        generator: TemplateGenerator | None = None,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        if scanner is None:
            try:
                scanner = Scanner(config)
            except (TypeError, ValueError, RuntimeError) as exc:
                raise ConfigError(f"Invalid exportClassifier: {exc}") from exc
        self.scanner = scanner
        self.generator = generator or TemplateGenerator()
        self.logger = get_logger("codegen")
        self._clock = clock or (lambda: datetime.now(UTC))
        self._last_scan: Optional[ScanResult] = None

    @classmethod
    def create(
        cls,
        cwd: Path | str | None = None,
        *,
        config_path: Path | str | None = None,
        overrides: ConfigOverrides | None = None,
    ) -> "Codegen":
        """Load configuration for ``cwd`` and build a ready-to-run pipeline."""
        config = load_config(cwd, config_path=config_path, overrides=overrides)
        return cls(config)

    @property
    def last_scan(self) -> Optional[ScanResult]:
        return self._last_scan

    def scan(self) -> ScanResult:
        """Run a fresh scan and remember it for later ``validate`` calls."""
        result = self.scanner.scan()
        self._last_scan = result
        self.logger.debug(
            "Scan found %d components, skipped %d directories",
            len(result.components),
            len(result.skipped_directory_names),
        )
        return result

    def generate(self) -> GenerationOutcome:
        """Scan, render and write the registry module, replacing any previous file."""
        self.logger.info("Scanning component directory %s", self.config.root_directory)
        try:
            # Never reuse a cached scan before writing.
            scan_result = self.scan()
            content = self.generator.render(scan_result, self.config, generated_at=self._clock())
            self._write(content)
        except CodegenError:
            raise
        except Exception as exc:
            raise CodegenError(
                f"Failed to generate component registry: {exc}", kind=ErrorKind.GENERATION
            ) from exc

        self.logger.info(
            "Component registry generated at %s (%d components, %d skipped)",
            self.config.output_file,
            len(scan_result.components),
            len(scan_result.skipped_directory_names),
        )
        return GenerationOutcome(
            output_file=self.config.output_file,
            scan_result=scan_result,
            content=content,
        )

    def validate(self, *, use_cache: bool = True) -> ValidationReport:
        """Return a validation report, reusing the last scan when allowed."""
        self.logger.info("Analyzing components in %s", self.config.root_directory)
        try:
            scan_result = self._last_scan if use_cache else None
            if scan_result is None:
                scan_result = self.scan()
            report = build_report(scan_result, timestamp=self._clock())
        except CodegenError:
            raise
        except Exception as exc:
            raise CodegenError(
                f"Failed to analyze components: {exc}", kind=ErrorKind.VALIDATION
            ) from exc

        summary = report.summary
        self.logger.info(
            "%d components checked: %d valid, %d with warnings, %d with errors",
            summary.total,
            summary.valid,
            summary.with_warnings,
            summary.with_errors,
        )
        return report

    def _write(self, content: str) -> None:
        output = self.config.output_file
        try:
            ensure_parent_directory(output)
        except OSError as exc:
            raise WriteError(f"Failed to create output directory {output.parent}: {exc}") from exc

        temp_name: Optional[str] = None
        try:
            mode = _DEFAULT_FILE_MODE
            if output.is_file():
                mode = output.stat().st_mode & 0o777

            # Write beside the target then swap, so a failure leaves no partial file.
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=output.parent,
                prefix=f".{output.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(content)
            os.chmod(temp_name, mode)
            os.replace(temp_name, output)
        except OSError as exc:
            if temp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)
            raise WriteError(f"Failed to write registry file {output}: {exc}") from exc


__all__ = ["Codegen", "GenerationOutcome"]
