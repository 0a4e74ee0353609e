from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.doclet_builder import DocletSetBuilder


@pytest.fixture
def doclet_builder(tmp_path: Path) -> DocletSetBuilder:
    """Provide a documented project rooted at the pytest tmp_path."""
    return DocletSetBuilder(tmp_path)
