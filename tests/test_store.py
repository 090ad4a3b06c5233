"""Tests for the key-value stores."""

import json
import logging

from parlorgames.core.store import InMemoryStore, JsonFileStore


class TestInMemoryStore:
    def test_get_missing_is_none(self):
        assert InMemoryStore().get("nope") is None

    def test_set_get_delete(self):
        store = InMemoryStore()
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        assert store.get("k") is None
        store.delete("k")  # deleting twice is fine

    def test_initial_values_copied(self):
        initial = {"k": "v"}
        store = InMemoryStore(initial)
        store.set("k", "w")
        assert initial["k"] == "v"


class TestJsonFileStore:
    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "stats.json")
        assert store.get("k") is None
        assert store.keys() == []

    def test_set_creates_file_and_parents(self, tmp_path):
        path = tmp_path / "nested" / "stats.json"
        store = JsonFileStore(path)
        store.set("ticTacToeStats", '{"matches": 1}')
        assert path.exists()
        assert json.loads(path.read_text()) == {"ticTacToeStats": '{"matches": 1}'}

    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "stats.json"
        JsonFileStore(path).set("a", "1")
        JsonFileStore(path).set("b", "2")
        store = JsonFileStore(path)
        assert store.get("a") == "1"
        assert store.get("b") == "2"

    def test_delete(self, tmp_path):
        store = JsonFileStore(tmp_path / "stats.json")
        store.set("a", "1")
        store.delete("a")
        assert store.get("a") is None

    def test_corrupt_file_reads_empty_and_is_replaced(self, tmp_path, caplog):
        path = tmp_path / "stats.json"
        path.write_text("{broken")
        store = JsonFileStore(path)
        with caplog.at_level(logging.WARNING, logger="parlorgames.core.store"):
            assert store.get("a") is None
        assert "Ignoring unreadable store" in caplog.text
        store.set("a", "1")
        assert json.loads(path.read_text()) == {"a": "1"}

    def test_non_object_file_reads_empty(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text("[1, 2]")
        assert JsonFileStore(path).get("a") is None

    def test_non_string_value_ignored(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text(json.dumps({"a": 5}))
        assert JsonFileStore(path).get("a") is None

    def test_corrupt_file_moved_aside_before_write(self, tmp_path, caplog):
        path = tmp_path / "stats.json"
        path.write_text('{"connect4Stats": "{\\"matches\\": 3}",')
        store = JsonFileStore(path)
        with caplog.at_level(logging.WARNING, logger="parlorgames.core.store"):
            store.set("ticTacToeStats", "{}")
        corrupt = tmp_path / "stats.json.corrupt"
        assert corrupt.read_text() == '{"connect4Stats": "{\\"matches\\": 3}",'
        assert json.loads(path.read_text()) == {"ticTacToeStats": "{}"}
        assert "Moved unreadable store" in caplog.text

    def test_read_leaves_corrupt_file_in_place(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text("{broken")
        store = JsonFileStore(path)
        assert store.keys() == []
        assert path.read_text() == "{broken"
        assert not (tmp_path / "stats.json.corrupt").exists()
