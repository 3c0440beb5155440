"""Export classifier implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable

from .base import ExportClassifier
from .regex import RegexExportClassifier

_ENTRY_POINT_GROUP = "widgetgen.classifiers"

_BUILTIN_FACTORIES: dict[str, Callable[[], ExportClassifier]] = {
    "regex": RegexExportClassifier,
}


def get_classifier(name: str = "regex") -> ExportClassifier:
    """Return the classifier registered as ``name`` (builtin or entry point)."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load classifier entry point '{entry.name}': {exc}") from exc
        return _coerce_classifier(loaded)

    known = ", ".join(available_classifiers())
    raise ValueError(f"Unknown export classifier '{name}' (available: {known})")


def available_classifiers() -> list[str]:
    names = list(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        if entry.name.lower() not in names:
            names.append(entry.name.lower())
    return names


def _coerce_classifier(obj: object) -> ExportClassifier:
    if isinstance(obj, ExportClassifier):
        return obj
    if isinstance(obj, type) and issubclass(obj, ExportClassifier):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, ExportClassifier):
            return instance
    raise TypeError("Classifier entry point must be an ExportClassifier subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ExportClassifier",
    "RegexExportClassifier",
    "available_classifiers",
    "get_classifier",
]
