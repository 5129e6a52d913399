"""Tests for lawmate.backup: export, import and reset."""
from __future__ import annotations

from pathlib import Path

import duckdb
import orjson
import pytest

from lawmate.backup import BACKUP_VERSION, build_backup, export_data, import_data, reset_data
from lawmate.section_types import Note, Section, Settings
from lawmate.store import DuckDBStore, MemoryStore


@pytest.fixture()
def filled() -> MemoryStore:
    s = MemoryStore()
    s.save_overrides([
        Section(id="crim-112", number="112", body="ใหม่", is_override=True, collection_id="crim"),
        Section(id="custom-1", number="1", body="เพิ่ม", category="กฎหมายเพิ่มเติม", is_override=True),
    ])
    s.save_notes({"crim-112": Note(section_id="crim-112", text="จำ", updated_at=5)})
    s.save_settings(Settings(dark_mode=True))
    return s


class TestExport:
    def test_document_shape(self, filled: MemoryStore) -> None:
        doc = orjson.loads(export_data(filled, timestamp=42))
        assert doc["version"] == BACKUP_VERSION
        assert doc["timestamp"] == 42
        assert list(doc["notes"]) == ["crim-112"]
        assert doc["notes"]["crim-112"]["text"] == "จำ"
        assert [o["id"] for o in doc["overrides"]] == ["crim-112", "custom-1"]
        assert "settings" not in doc

    def test_build_backup_uses_clock(self, filled: MemoryStore) -> None:
        assert build_backup(filled)["timestamp"] > 0


class TestImport:
    def test_export_then_import(self, filled: MemoryStore) -> None:
        target = MemoryStore()
        assert import_data(target, export_data(filled)) is True
        assert target.load_overrides() == filled.load_overrides()
        assert target.load_notes() == filled.load_notes()

    def test_import_replaces_existing(self, filled: MemoryStore) -> None:
        raw = orjson.dumps({"notes": {}, "overrides": []})
        assert import_data(filled, raw) is True
        assert filled.load_overrides() == []
        assert filled.load_notes() == {}

    def test_note_key_supplies_section_id(self) -> None:
        target = MemoryStore()
        raw = orjson.dumps({"notes": {"civil-1": {"text": "x"}}, "overrides": []})
        assert import_data(target, raw) is True
        assert target.load_notes()["civil-1"].section_id == "civil-1"

    def test_note_key_beats_recorded_id(self) -> None:
        target = MemoryStore()
        raw = orjson.dumps({
            "notes": {"crim-1": {"section_id": "crim-2", "text": "x"}},
            "overrides": [],
        })
        assert import_data(target, raw) is True
        notes = target.load_notes()
        assert list(notes) == ["crim-1"]
        assert notes["crim-1"].section_id == "crim-1"

    def test_overrides_not_array_rejected(self, filled: MemoryStore) -> None:
        before = (filled.load_overrides(), filled.load_notes())
        raw = orjson.dumps({"notes": {}, "overrides": "not-an-array"})
        assert import_data(filled, raw) is False
        assert (filled.load_overrides(), filled.load_notes()) == before

    @pytest.mark.parametrize("raw", [
        b"{not json",
        b"[]",
        b'{"overrides": []}',
        b'{"notes": [], "overrides": []}',
        b'{"notes": {"a": 1}, "overrides": []}',
        b'{"notes": {}, "overrides": [{"number": "1"}]}',
        b'{"notes": {}, "overrides": [1]}',
    ])
    def test_malformed_rejected_without_writes(self, filled: MemoryStore, raw: bytes) -> None:
        before = (filled.load_overrides(), filled.load_notes())
        assert import_data(filled, raw) is False
        assert (filled.load_overrides(), filled.load_notes()) == before

    def test_accepts_str(self) -> None:
        assert import_data(MemoryStore(), '{"notes": {}, "overrides": []}') is True


class TestImportDuckDB:
    def test_failed_write_keeps_previous_data(self, tmp_path: Path, monkeypatch) -> None:
        with DuckDBStore(tmp_path / "u.duckdb", create_if_missing=True) as store:
            store.save_notes({"a": Note(section_id="a", text="old")})
            store.save_overrides([Section(id="custom-1", number="1", body="old", is_override=True)])
            # Rows of the wrong width make the overrides insert fail after
            # the notes table has already been rewritten.
            monkeypatch.setattr(store, "_override_rows", lambda overrides: [["bad"]])
            raw = orjson.dumps({
                "notes": {"b": {"text": "new"}},
                "overrides": [{"id": "custom-2", "number": "2", "body": "new"}],
            })
            with pytest.raises(duckdb.Error):
                import_data(store, raw)
            assert list(store.load_notes()) == ["a"]
            assert [s.id for s in store.load_overrides()] == ["custom-1"]

    def test_import_round_trip(self, tmp_path: Path, filled: MemoryStore) -> None:
        with DuckDBStore(tmp_path / "u.duckdb", create_if_missing=True) as store:
            assert import_data(store, export_data(filled)) is True
            assert store.load_overrides() == filled.load_overrides()
            assert store.load_notes() == filled.load_notes()
            reset_data(store)
            assert store.load_notes() == {}
            assert store.load_overrides() == []


class TestReset:
    def test_reset_keeps_settings(self, filled: MemoryStore) -> None:
        reset_data(filled)
        assert filled.load_overrides() == []
        assert filled.load_notes() == {}
        assert filled.load_settings() == Settings(dark_mode=True)
