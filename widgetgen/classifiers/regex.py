"""Text-pattern classifier for ES module default exports."""

from __future__ import annotations

import re

from .base import ExportClassifier

# export default function Button() {...} / export default Button;
INLINE_DEFAULT_EXPORT = re.compile(r"export\s+default\s+[^;]+")
# export { Button as default }
NAMED_DEFAULT_EXPORT = re.compile(r"export\s*\{\s*\w+\s+as\s+default\s*\}")


class RegexExportClassifier(ExportClassifier):
    """Matches default-export declarations on raw source without parsing it."""

    def has_primary_export(self, source: str) -> bool:
        return bool(
            INLINE_DEFAULT_EXPORT.search(source) or NAMED_DEFAULT_EXPORT.search(source)
        )
