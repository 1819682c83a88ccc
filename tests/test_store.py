"""
Tests for the read and mutation operations of JSONStore.
"""

import json
from pathlib import Path

import pytest
from inline_snapshot import snapshot

from json_kv import InvalidDocumentError, JSONCodec, JSONStore, StoreOptions
from tests.conftest import read_document


class TestReadWrite:
    @pytest.fixture
    def store(self, store_path: Path) -> JSONStore:
        return JSONStore(store_path)

    def test_set_then_get(self, store: JSONStore):
        store.set("key", {"nested": [1, 2.5, None, True, "text"]})

        assert store.get("key") == {"nested": [1, 2.5, None, True, "text"]}

    def test_set_replaces(self, store: JSONStore):
        store.set("key", "first")
        store.set("key", "second")

        assert store.get("key") == "second"
        assert len(store) == 1

    def test_get_missing(self, store: JSONStore):
        assert store.get("missing") is None
        assert store.get("missing", "fallback") == "fallback"

    def test_stored_none_is_present(self, store: JSONStore):
        store.set("nothing", None)

        assert store.get("nothing", "fallback") is None
        assert store.has("nothing") is True
        assert store.has("other") is False

    def test_init_first_write_wins(self, store: JSONStore):
        store.init("key", "v1")
        store.init("key", "v2")

        assert store.get("key") == "v1"

    def test_init_keeps_falsy_value(self, store: JSONStore):
        store.set("key", 0)
        store.init("key", 42)

        assert store.get("key") == 0

    def test_has_tracks_mutations(self, store: JSONStore):
        assert store.has("key") is False

        store.init("key", 1)
        assert store.has("key") is True
        assert "key" in store

        assert store.delete("key") is True
        assert store.has("key") is False
        assert "key" not in store

    def test_delete_missing_reports_absence(self, store: JSONStore):
        store.set("kept", 1)

        assert store.delete("missing") is False
        assert store.document() == {"kept": 1}

    def test_delete_all(self, store: JSONStore):
        for index in range(3):
            store.set(f"key_{index}", index)

        assert store.delete_all() is store
        assert store.document() == {}
        assert read_document(store.path) == {}

    def test_keys_and_iteration(self, store: JSONStore):
        store.set("b", 1)
        store.set("a", 2)

        assert store.keys() == ["b", "a"]
        assert list(store) == ["b", "a"]

    def test_repr(self, store: JSONStore):
        store.set("a", 1)

        assert repr(store) == f"JSONStore(path={str(store.path)!r}, keys=1)"


class TestSyncOnWrite:
    def test_every_mutation_is_persisted(self, store_path: Path):
        store = JSONStore(store_path)

        store.set("a", 1)
        assert read_document(store_path) == {"a": 1}

        store.init("b", 2)
        assert read_document(store_path) == {"a": 1, "b": 2}

        _ = store.delete("a")
        assert read_document(store_path) == {"b": 2}

    def test_noop_mutations_still_persist(self, store_path: Path):
        store = JSONStore(store_path)

        _ = store.delete("missing")
        assert read_document(store_path) == {}

        store_path.unlink()
        store.set("a", 1)
        store_path.unlink()
        store.init("a", 2)
        assert read_document(store_path) == {"a": 1}

    def test_delete_all_writes_once_per_key(self, store_path: Path, monkeypatch: pytest.MonkeyPatch):
        store = JSONStore(store_path)
        for key in ("a", "b", "c"):
            store.set(key, key)

        written: list[str] = []

        def record_write(path: Path, text: str) -> None:
            written.append(text)

        monkeypatch.setattr("json_kv.store.write_document", record_write)

        _ = store.delete_all()

        assert [json.loads(text) for text in written] == [{"b": "b", "c": "c"}, {"c": "c"}, {}]

    def test_disabled_sync_on_write(self, store_path: Path):
        store = JSONStore(store_path, sync_on_write=False)

        store.set("a", 1)
        _ = store.delete("b")
        _ = store.delete_all()
        store.init("c", 3)

        assert not store_path.exists()

        store.sync()

        assert read_document(store_path) == {"c": 3}

    def test_relative_path_scenario(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)

        store = JSONStore("data/test", {"syncOnWrite": False})

        assert store.path == Path("data/test.json")
        assert (tmp_path / "data").is_dir()

        store.set("esm", "hello")

        assert store.get("esm") == "hello"
        assert not (tmp_path / "data" / "test.json").exists()

        store.sync()

        assert (tmp_path / "data" / "test.json").read_text(encoding="utf-8") == snapshot(
            """\
{
    "esm": "hello"
}\
"""
        )

    def test_round_trip_through_fresh_instance(self, store_path: Path):
        first = JSONStore(store_path)
        for index in range(25):
            first.set(f"key_{index}", {"index": index, "squares": [index * index]})

        second = JSONStore(store_path)

        assert second.document() == first.document()
        assert len(second) == 25


class TestDocument:
    @pytest.fixture
    def store(self, store_path: Path) -> JSONStore:
        store = JSONStore(store_path)
        store.set("list", [1, 2, 3])
        return store

    def test_document_is_a_deep_copy(self, store: JSONStore):
        document = store.document()
        document["list"].append(4)
        document["new"] = True

        assert store.document() == {"list": [1, 2, 3]}

    def test_replace(self, store: JSONStore, store_path: Path):
        replacement = {"a": {"b": [1, 2]}}

        assert store.document(replacement) == {"a": {"b": [1, 2]}}
        assert store.has("list") is False
        assert store.get("a") == {"b": [1, 2]}

        # Replacing does not persist.
        assert read_document(store_path) == {"list": [1, 2, 3]}

    def test_replacement_is_copied(self, store: JSONStore):
        replacement = {"a": [1]}
        _ = store.document(replacement)

        replacement["a"].append(2)

        assert store.get("a") == [1]

    def test_replace_with_empty_mapping(self, store: JSONStore):
        assert store.document({}) == {}
        assert len(store) == 0

    def test_replacement_is_normalized(self, store: JSONStore):
        assert store.document({"pair": (1, 2)}) == {"pair": [1, 2]}

    def test_cyclic_replacement_is_rejected(self, store: JSONStore):
        cyclic: dict[str, object] = {}
        cyclic["self"] = cyclic

        with pytest.raises(InvalidDocumentError):
            _ = store.document(cyclic)

        assert store.document() == {"list": [1, 2, 3]}

    @pytest.mark.parametrize(
        "replacement",
        [
            pytest.param({"value": {1, 2}}, id="set-value"),
            pytest.param({"value": float("nan")}, id="nan-value"),
            pytest.param({"value": object()}, id="object-value"),
            pytest.param([1, 2], id="list-root"),
        ],
    )
    def test_unserializable_replacement_is_rejected(self, store: JSONStore, replacement: object):
        with pytest.raises(InvalidDocumentError):
            _ = store.document(replacement)  # pyright: ignore[reportArgumentType]

        assert store.document() == {"list": [1, 2, 3]}


class TestOptions:
    def test_indent(self, store_path: Path):
        store = JSONStore(store_path, indent=2)
        store.set("a", [1])

        assert store_path.read_text(encoding="utf-8") == snapshot(
            """\
{
  "a": [
    1
  ]
}\
"""
        )

    def test_compact(self, store_path: Path):
        store = JSONStore(store_path, {"jsonSpaces": 0})
        store.set("a", [1, "é"])

        assert store_path.read_text(encoding="utf-8") == snapshot('{"a":[1,"é"]}')

    def test_custom_functions(self, store_path: Path):
        def stringify(value: object, indent: int | None = None) -> str:
            return json.dumps(value, indent=indent, sort_keys=True)

        store = JSONStore(store_path, {"stringify": stringify, "parse": json.loads, "jsonSpaces": 1})
        store.set("b", 1)
        store.set("a", 2)

        assert store_path.read_text(encoding="utf-8") == snapshot(
            """\
{
 "a": 2,
 "b": 1
}\
"""
        )
        assert JSONStore(store_path, parse=json.loads).document() == {"a": 2, "b": 1}

    def test_codec_uses_store_indent(self, store_path: Path):
        store = JSONStore(store_path, codec=JSONCodec(), indent=2)
        store.set("a", 1)

        assert store_path.read_text(encoding="utf-8") == snapshot('{\n  "a": 1\n}')

    def test_no_indent_reaches_custom_serializer(self, store_path: Path):
        seen: list[int | None] = []

        def stringify(value: object, indent: int | None = None) -> str:
            seen.append(indent)
            return json.dumps(value, indent=indent)

        store = JSONStore(store_path, {"stringify": stringify, "jsonSpaces": None})
        store.set("a", [1, 2])

        assert seen == [None]
        assert store_path.read_text(encoding="utf-8") == snapshot('{"a": [1, 2]}')

    def test_options_object_with_overrides(self, store_path: Path):
        store = JSONStore(store_path, StoreOptions(indent=8), sync_on_write=False)

        assert store.options == StoreOptions(indent=8, sync_on_write=False)
