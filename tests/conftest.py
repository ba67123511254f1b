from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.snapshot_builder import SnapshotBuilder


@pytest.fixture
def builder(tmp_path: Path) -> SnapshotBuilder:
    """Provide a snapshot builder rooted at the pytest tmp_path."""
    return SnapshotBuilder(tmp_path)
