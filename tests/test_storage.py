"""Tests for document store implementations."""

from __future__ import annotations

import fnmatch
from pathlib import Path

import pytest

from anomanet.config import Settings
from anomanet.storage import (
    FilesystemDocumentStore,
    MemoryDocumentStore,
    RedisDocumentStore,
    create_store,
)


class RecordingRedis:
    """Dict-backed client exposing the handful of redis calls the store makes."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def scan_iter(self, match: str):  # type: ignore[no-untyped-def]
        return (k for k in list(self.data) if fnmatch.fnmatchcase(k, match))


@pytest.fixture(params=["memory", "filesystem", "redis"])
def any_store(request, tmp_path: Path):  # type: ignore[no-untyped-def]
    if request.param == "memory":
        return MemoryDocumentStore()
    if request.param == "filesystem":
        return FilesystemDocumentStore(tmp_path)
    return RedisDocumentStore(redis_url="redis://unused", key_prefix="test", client=RecordingRedis())


def test_put_get_delete(any_store) -> None:
    assert any_store.get("users/u1/evidence.json") is None

    any_store.put("users/u1/evidence.json", {"items": [], "n": 1})
    assert any_store.get("users/u1/evidence.json") == {"items": [], "n": 1}

    any_store.put("users/u1/evidence.json", {"items": ["x"]})
    assert any_store.get("users/u1/evidence.json") == {"items": ["x"]}

    any_store.delete("users/u1/evidence.json")
    any_store.delete("users/u1/evidence.json")
    assert any_store.get("users/u1/evidence.json") is None


def test_list_by_prefix(any_store) -> None:
    any_store.put("cases/available/b.json", {"id": "b"})
    any_store.put("cases/available/a.json", {"id": "a"})
    any_store.put("users/u1/cases.json", {})

    assert any_store.list("cases/available/") == ["cases/available/a.json", "cases/available/b.json"]
    assert any_store.list("nothing/") == []


@pytest.mark.asyncio
async def test_async_twins(any_store) -> None:
    await any_store.aput("users/u1/channels.json", {"channels": []})

    assert await any_store.aget("users/u1/channels.json") == {"channels": []}
    assert await any_store.alist("users/") == ["users/u1/channels.json"]

    await any_store.adelete("users/u1/channels.json")
    assert await any_store.aget("users/u1/channels.json") is None


def test_memory_store_hands_out_copies() -> None:
    store = MemoryDocumentStore()
    doc = {"items": []}
    store.put("p.json", doc)
    doc["items"].append("mutated")

    loaded = store.get("p.json")
    loaded["items"].append("also mutated")

    assert store.get("p.json") == {"items": []}


def test_filesystem_store_rejects_traversal(tmp_path: Path) -> None:
    store = FilesystemDocumentStore(tmp_path / "root")

    with pytest.raises(ValueError):
        store.put("../escape.json", {})
    with pytest.raises(ValueError):
        store.get("users/../../escape.json")


def test_filesystem_store_treats_garbage_as_absent(tmp_path: Path) -> None:
    store = FilesystemDocumentStore(tmp_path)
    target = tmp_path / "users" / "u1" / "evidence.json"
    target.parent.mkdir(parents=True)
    target.write_text("{not json", encoding="utf-8")

    assert store.get("users/u1/evidence.json") is None


def test_create_store_follows_settings(tmp_path: Path) -> None:
    assert isinstance(create_store(Settings(storage_backend="memory")), MemoryDocumentStore)

    fs = create_store(Settings(storage_backend="filesystem", storage_dir=tmp_path))
    assert isinstance(fs, FilesystemDocumentStore)
    assert fs.root == tmp_path.resolve()
