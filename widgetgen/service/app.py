"""FastAPI application entrypoint for widgetgen service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..codegen import Codegen, GenerationOutcome
from ..config import ConfigOverrides
from ..errors import CodegenError, ConfigError
from ..models import ValidationReport


class CodegenRequest(BaseModel):
    cwd: Optional[str] = None
    config_path: Optional[str] = None
    components_dir: Optional[str] = None
    output_file: Optional[str] = None
    registry: Optional[str] = None
    import_path: Optional[str] = None
    import_name: Optional[str] = None

    def overrides(self) -> ConfigOverrides:
        return ConfigOverrides(
            components_dir=self.components_dir,
            output_file=self.output_file,
            registry_type=self.registry,
            import_path=self.import_path,
            import_name=self.import_name,
        )


class GenerateResponse(BaseModel):
    output_file: str
    components: list[str]
    skipped: list[str]
    warnings: list[str]


class HealthResponse(BaseModel):
    status: str


CodegenFactory = Callable[[CodegenRequest], Codegen]


def _inside(base: Path, path: Path, label: str) -> Path:
    resolved = path.resolve()
    if not resolved.is_relative_to(base):
        raise ConfigError(f"{label} must stay inside {base}: {path}")
    return resolved


def confined_codegen_factory(base_dir: Path | str) -> CodegenFactory:
    """Build pipelines whose inputs and output all resolve inside ``base_dir``.

    Request paths are taken relative to ``base_dir`` and checked after
    symlink resolution. Python config scripts are executed on load, so a
    request may not name one explicitly.
    """
    base = Path(base_dir).resolve()

    def _factory(payload: CodegenRequest) -> Codegen:
        cwd = _inside(base, base / payload.cwd if payload.cwd else base, "cwd")
        config_path = None
        if payload.config_path is not None:
            config_path = _inside(base, cwd / payload.config_path, "config_path")
            if config_path.suffix == ".py":
                raise ConfigError("Python config scripts cannot be selected through the service")

        codegen = Codegen.create(cwd, config_path=config_path, overrides=payload.overrides())
        _inside(base, codegen.config.root_directory, "componentsDir")
        _inside(base, codegen.config.output_file, "outputFile")
        return codegen

    return _factory


async def _run_blocking(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    codegen_factory: CodegenFactory | None = None, *, base_dir: Path | str | None = None
) -> FastAPI:
    """Create the FastAPI application exposing generate/validate.

    Without an explicit factory, requests are confined to ``base_dir``
    (the process working directory by default).
    """
    if codegen_factory is None:
        codegen_factory = confined_codegen_factory(base_dir or Path.cwd())

    app = FastAPI(title="widgetgen service", version="1.0.0")

    def get_factory() -> CodegenFactory:
        return codegen_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: CodegenRequest,
        factory: CodegenFactory = Depends(get_factory),
    ) -> GenerateResponse:
        def _run_generate() -> GenerationOutcome:
            # A fresh pipeline per request; nothing is shared between callers.
            return factory(payload).generate()

        outcome: GenerationOutcome = await _run_blocking(_run_generate)
        scan = outcome.scan_result
        return GenerateResponse(
            output_file=str(Path(outcome.output_file)),
            components=[component.name for component in scan.components],
            skipped=list(scan.skipped_directory_names),
            warnings=list(scan.warnings),
        )

    @app.post("/validate")
    async def validate(
        payload: CodegenRequest,
        factory: CodegenFactory = Depends(get_factory),
    ) -> Dict[str, Any]:
        def _run_validate() -> ValidationReport:
            return factory(payload).validate()

        report: ValidationReport = await _run_blocking(_run_validate)
        return report.to_dict()

    @app.exception_handler(CodegenError)
    async def codegen_error_handler(_: Any, exc: CodegenError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc), "kind": exc.kind.value})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, *, base_dir: Path | str | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(base_dir=base_dir), host=host, port=port)
