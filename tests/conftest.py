from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from dal.kv_dal import InMemoryKeyValueStore  # noqa: E402
from services.session_persistence import SessionPersistence  # noqa: E402


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def persistence(kv: InMemoryKeyValueStore) -> SessionPersistence:
    return SessionPersistence(kv, key="test.session")
