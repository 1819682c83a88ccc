"""
Test configuration and fixtures.
"""

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    """The backing file of a store that does not exist yet."""
    return tmp_path / "store.json"


@pytest.fixture
def populated_path(store_path: Path) -> Path:
    """A backing file that already holds a document."""
    _ = store_path.write_text(json.dumps({"a": 1, "b": 2}), encoding="utf-8")
    return store_path


def read_document(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))
