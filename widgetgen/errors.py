"""Error types raised by the widgetgen pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories callers can branch on."""

    CONFIG = "config"
    SCAN = "scan"
    WRITE = "write"
    GENERATION = "generation"
    VALIDATION = "validation"


class CodegenError(RuntimeError):
    """Tool-level failure carrying an error kind and a readable message."""

    kind: ErrorKind = ErrorKind.GENERATION

    def __init__(self, message: str, *, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


class ConfigError(CodegenError):
    """Raised when a configuration source exists but cannot be used."""

    kind = ErrorKind.CONFIG


class ScanError(CodegenError):
    """Raised when the components directory cannot be listed."""

    kind = ErrorKind.SCAN


class WriteError(CodegenError):
    """Raised when the generated registry cannot be written."""

    kind = ErrorKind.WRITE


__all__ = ["CodegenError", "ConfigError", "ErrorKind", "ScanError", "WriteError"]
