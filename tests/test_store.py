"""Tests for lawmate.store: in-memory and DuckDB persistence."""
from __future__ import annotations

from pathlib import Path

import duckdb
import pytest

from lawmate.section_types import Note, Section, Settings, TextHighlight
from lawmate.store import (
    SCHEMA_VERSION,
    DuckDBStore,
    MemoryStore,
    SchemaVersionError,
    open_store,
)


# ───────────────────── Fixtures ──────────────────────────────────────


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "user" / "lawmate.duckdb"


@pytest.fixture()
def duck(db_path: Path) -> DuckDBStore:
    s = DuckDBStore(db_path, create_if_missing=True)
    yield s  # type: ignore[misc]
    s.close()


def _override(sid: str = "crim-112", body: str = "ใหม่") -> Section:
    return Section(
        id=sid, number="112", body=body, category="ประมวลกฎหมายอาญา",
        is_override=True, collection_id="crim",
    )


def _note(sid: str = "crim-112") -> Note:
    return Note(
        section_id=sid,
        text="บันทึก",
        is_highlighted=True,
        highlights=(TextHighlight(0, 4, "green"),),
        updated_at=1_700_000_000_000,
    )


# ───────────────────── MemoryStore ───────────────────────────────────


class TestMemoryStore:
    def test_defaults(self) -> None:
        s = MemoryStore()
        assert s.load_overrides() == []
        assert s.load_notes() == {}
        assert s.load_settings() == Settings()

    def test_load_returns_copies(self) -> None:
        s = MemoryStore()
        s.save_overrides([_override()])
        loaded = s.load_overrides()
        loaded.append(_override("crim-113"))
        assert len(s.load_overrides()) == 1

    def test_save_copies_input(self) -> None:
        s = MemoryStore()
        notes = {"crim-112": _note()}
        s.save_notes(notes)
        notes.clear()
        assert list(s.load_notes()) == ["crim-112"]

    def test_replace_user_data(self) -> None:
        s = MemoryStore()
        s.save_settings(Settings(font_size=4))
        s.replace_user_data({"crim-112": _note()}, [_override()])
        assert s.load_notes() == {"crim-112": _note()}
        assert s.load_overrides() == [_override()]
        assert s.load_settings().font_size == 4


# ───────────────────── DuckDBStore ───────────────────────────────────


class TestDuckDBStore:
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            DuckDBStore(tmp_path / "absent.duckdb")

    def test_creates_parent_dirs(self, duck: DuckDBStore, db_path: Path) -> None:
        assert db_path.exists()
        assert duck.db_path == db_path

    def test_empty_defaults(self, duck: DuckDBStore) -> None:
        assert duck.load_overrides() == []
        assert duck.load_notes() == {}
        assert duck.load_settings() == Settings()

    def test_overrides_round_trip_keeps_order(self, duck: DuckDBStore) -> None:
        sections = [_override("crim-113"), _override("crim-112"), _override("custom-1")]
        duck.save_overrides(sections)
        assert duck.load_overrides() == sections

    def test_duplicate_ids_last_wins(self, duck: DuckDBStore) -> None:
        duck.save_overrides([_override(body="a"), _override("crim-1"), _override(body="b")])
        loaded = duck.load_overrides()
        assert [(s.id, s.body) for s in loaded] == [("crim-112", "b"), ("crim-1", "ใหม่")]

    def test_save_replaces_everything(self, duck: DuckDBStore) -> None:
        duck.save_overrides([_override("a"), _override("b")])
        duck.save_overrides([_override("c")])
        assert [s.id for s in duck.load_overrides()] == ["c"]
        duck.save_notes({"a": _note("a")})
        duck.save_notes({})
        assert duck.load_notes() == {}

    def test_notes_round_trip(self, duck: DuckDBStore) -> None:
        duck.save_notes({"crim-112": _note()})
        assert duck.load_notes() == {"crim-112": _note()}

    def test_replace_user_data(self, duck: DuckDBStore) -> None:
        duck.save_settings(Settings(dark_mode=True))
        duck.save_notes({"old": _note("old")})
        duck.replace_user_data({"crim-112": _note()}, [_override(body="a"), _override(body="b")])
        assert list(duck.load_notes()) == ["crim-112"]
        assert [s.body for s in duck.load_overrides()] == ["b"]
        assert duck.load_settings().dark_mode is True

    def test_settings_round_trip(self, duck: DuckDBStore) -> None:
        settings = Settings(dark_mode=True, font_size=5, font_style="traditional")
        duck.save_settings(settings)
        duck.save_settings(settings)
        assert duck.load_settings() == settings

    def test_persists_across_reopen(self, db_path: Path) -> None:
        with DuckDBStore(db_path, create_if_missing=True) as s:
            s.save_overrides([_override()])
            s.save_notes({"crim-112": _note()})
        with DuckDBStore(db_path) as s:
            assert s.load_overrides() == [_override()]
            assert s.load_notes()["crim-112"].highlights[0].color == "green"

    def test_schema_version_mismatch(self, db_path: Path) -> None:
        DuckDBStore(db_path, create_if_missing=True).close()
        conn = duckdb.connect(str(db_path))
        conn.execute("UPDATE _schema_version SET version = '0.0.1' WHERE table_name = 'store'")
        conn.close()
        with pytest.raises(SchemaVersionError, match=SCHEMA_VERSION):
            DuckDBStore(db_path)


class TestOpenStore:
    def test_no_path_gives_memory_store(self) -> None:
        assert isinstance(open_store(None), MemoryStore)
        assert isinstance(open_store(""), MemoryStore)

    def test_path_gives_duckdb_store(self, db_path: Path) -> None:
        s = open_store(db_path)
        try:
            assert isinstance(s, DuckDBStore)
        finally:
            s.close()
