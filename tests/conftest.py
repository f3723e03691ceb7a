from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from tests import host_fixtures


@pytest.fixture
def refactored_source() -> str:
    return host_fixtures.refactored_host_source()


@pytest.fixture
def legacy_source() -> str:
    return host_fixtures.legacy_host_source()


@pytest.fixture
def write_host_source(tmp_path: Path):
    def _write(text: str, name: str = "host_main.py") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
