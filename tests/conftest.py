from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.widget_builder import WidgetTreeBuilder


@pytest.fixture
def widget_tree(tmp_path: Path) -> WidgetTreeBuilder:
    """Provide a widget project rooted at the pytest tmp_path."""
    return WidgetTreeBuilder(tmp_path)
