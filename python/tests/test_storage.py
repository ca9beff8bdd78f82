from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.errors import PersistenceReadError, PersistenceWriteError
from backend.storage import JsonFileStore, MemoryStore


def test_memory_store_roundtrip() -> None:
    kv = MemoryStore({"a": "1"})
    assert kv.get("a") == "1"
    assert kv.get("missing") is None
    kv.set("b", "2")
    assert kv.get("b") == "2"


def test_missing_file_reads_as_empty(tmp_path: Path) -> None:
    assert JsonFileStore(tmp_path / "nope.json").get("k") is None


def test_set_creates_file_and_parents(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    kv = JsonFileStore(path)
    kv.set("k", "v")

    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
    assert JsonFileStore(path).get("k") == "v"
    assert not path.with_name("storage.json.tmp").exists()


def test_set_preserves_other_keys(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    JsonFileStore(path).set("scores", "[]")
    assert json.loads(path.read_text(encoding="utf-8")) == {"theme": "dark", "scores": "[]"}


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", "{\"k\": 5}"])
def test_unreadable_contents_raise_on_get(tmp_path: Path, content: str) -> None:
    path = tmp_path / "storage.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(PersistenceReadError) as info:
        JsonFileStore(path).get("k")
    assert info.value.key == "k"


def test_set_overwrites_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{broken", encoding="utf-8")

    kv = JsonFileStore(path)
    kv.set("k", "v")
    assert kv.get("k") == "v"


def test_write_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    kv = JsonFileStore(blocker / "storage.json")

    with pytest.raises(PersistenceWriteError):
        kv.set("k", "v")
