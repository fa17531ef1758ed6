from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.upload_builder import UploadBuilder


@pytest.fixture
def upload_builder(tmp_path: Path) -> UploadBuilder:
    """Provide a reusable upload builder rooted at the pytest tmp_path."""
    return UploadBuilder(tmp_path)
