from __future__ import annotations

import asyncio
import json

import pytest

from dal.kv_dal import InMemoryKeyValueStore, KeyValueDAL
from models.annotated_item import AnnotatedItem
from models.feature_vector import ArmTightness, FeatureVector
from services.session_persistence import SessionPersistence
from utils.database_init import AsyncDatabaseInitializer


class BrokenStore:
    async def get(self, key):
        raise OSError("disk gone")

    async def put(self, key, value):
        raise OSError("quota exceeded")


def sample_items():
    return [
        AnnotatedItem(id="one", display_name="m31.jpg", image_ref="r1", final_label="Sb", confidence=90),
        AnnotatedItem(
            id="two",
            display_name="m82.jpg",
            image_ref="r2",
            features=FeatureVector(is_irregular=True, arm_tightness=ArmTightness.LOOSE),
            notes="starburst",
        ),
    ]


def test_absent_key_loads_empty(persistence) -> None:
    assert asyncio.run(persistence.load()) == []


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b'{"id": "x"}',
        b"[1, 2]",
        b'[{"displayName": "no id"}]',
        b'[{"id": "a"}, {"id": "a"}]',
        b'[{"id": "a", "features": []}]',
        b'[{"id": "a", "confidence": "high"}]',
        b"\xff\xfe",
    ],
)
def test_malformed_payload_loads_empty(payload: bytes) -> None:
    kv = InMemoryKeyValueStore({"k": payload})
    assert asyncio.run(SessionPersistence(kv, key="k").load()) == []


def test_unreadable_store_loads_empty() -> None:
    assert asyncio.run(SessionPersistence(BrokenStore(), key="k").load()) == []


def test_failed_save_is_swallowed() -> None:
    assert asyncio.run(SessionPersistence(BrokenStore(), key="k").save(sample_items())) is False


def test_save_then_load_round_trip(persistence, kv) -> None:
    items = sample_items()

    async def _run():
        assert await persistence.save(items) is True
        return await persistence.load()

    assert asyncio.run(_run()) == items
    stored = json.loads(kv.data["test.session"])
    assert [record["id"] for record in stored] == ["one", "two"]
    assert stored[1]["suggestedLabel"] == "Irr"


def test_load_recomputes_suggestion() -> None:
    record = {
        "id": "a",
        "displayName": "x.jpg",
        "imageRef": "r",
        "features": {"isIrregular": True},
        "suggestedLabel": "E7",
    }
    kv = InMemoryKeyValueStore({"k": json.dumps([record]).encode()})
    (item,) = asyncio.run(SessionPersistence(kv, key="k").load())
    assert item.suggested_label == "Irr"
    assert item.confidence == 70


def test_session_key_from_environment(monkeypatch, kv) -> None:
    monkeypatch.setenv("SESSION_KEY", "custom.key")
    assert SessionPersistence(kv).key == "custom.key"


def test_sqlite_kv_store(tmp_path) -> None:
    async def _run():
        initializer = AsyncDatabaseInitializer(tmp_path, reset=False)
        dal = KeyValueDAL(initializer)
        missing = await dal.get("session")
        await dal.put("session", b"first")
        await dal.put("session", b"second")
        value = await dal.get("session")
        deleted = await dal.delete("session")
        deleted_again = await dal.delete("session")
        return missing, value, deleted, deleted_again

    assert asyncio.run(_run()) == (None, b"second", True, False)
    assert (tmp_path / "app.db").exists()
    assert (tmp_path / "images").is_dir()


def test_sqlite_store_survives_restart_unless_reset(tmp_path) -> None:
    async def _write():
        persistence = SessionPersistence(KeyValueDAL(AsyncDatabaseInitializer(tmp_path, reset=False)), key="s")
        await persistence.save(sample_items())

    async def _read(reset: bool):
        persistence = SessionPersistence(KeyValueDAL(AsyncDatabaseInitializer(tmp_path, reset=reset)), key="s")
        return await persistence.load()

    asyncio.run(_write())
    assert asyncio.run(_read(reset=False)) == sample_items()
    assert asyncio.run(_read(reset=True)) == []


def test_database_dir_is_required(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_DIR", raising=False)
    with pytest.raises(RuntimeError):
        AsyncDatabaseInitializer()
