"""
Configuration file for pytest test suite.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def write_store(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a JSON content store and return its path."""

    def _write(records: Any) -> Path:
        path = tmp_path / "content.json"
        path.write_text(json.dumps(records, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "output_reel"
    path.mkdir()
    return path
