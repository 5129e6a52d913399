"""Persistence port for user data, with in-memory and DuckDB implementations.

The library never touches storage directly; it reads and writes whole
state snapshots through :class:`PersistencePort`:

* overrides -- list of user-edited or user-added sections
* notes     -- mapping of section id to :class:`Note`
* settings  -- display preferences

:class:`DuckDBStore` keeps each record as an orjson payload in a small
single-file database (``overrides``, ``notes``, ``settings`` tables).
Every save replaces the full table inside one transaction;
``replace_user_data`` swaps notes and overrides together in a single one.
"""
from __future__ import annotations

import importlib
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

from lawmate.io_utils import dumps_str, loads
from lawmate.section_types import Note, Section, Settings

# Dynamic DuckDB import for pyright compatibility
_duckdb_mod = importlib.import_module("duckdb")

SCHEMA_VERSION = "1.0.0"


class SchemaVersionError(RuntimeError):
    """Raised when a store DB schema version does not match expected."""


class PersistencePort(Protocol):
    """Load/save contract the library depends on."""

    def load_overrides(self) -> list[Section]: ...

    def save_overrides(self, overrides: list[Section]) -> None: ...

    def load_notes(self) -> dict[str, Note]: ...

    def save_notes(self, notes: dict[str, Note]) -> None: ...

    def load_settings(self) -> Settings: ...

    def save_settings(self, settings: Settings) -> None: ...

    def replace_user_data(
        self, notes: dict[str, Note], overrides: list[Section],
    ) -> None: ...


class MemoryStore:
    """Process-local store; state is copied on every load and save."""

    def __init__(self) -> None:
        self._overrides: list[Section] = []
        self._notes: dict[str, Note] = {}
        self._settings = Settings()

    def load_overrides(self) -> list[Section]:
        return list(self._overrides)

    def save_overrides(self, overrides: list[Section]) -> None:
        self._overrides = list(overrides)

    def load_notes(self) -> dict[str, Note]:
        return dict(self._notes)

    def save_notes(self, notes: dict[str, Note]) -> None:
        self._notes = dict(notes)

    def load_settings(self) -> Settings:
        return self._settings

    def save_settings(self, settings: Settings) -> None:
        self._settings = settings

    def replace_user_data(
        self, notes: dict[str, Note], overrides: list[Section],
    ) -> None:
        self._notes = dict(notes)
        self._overrides = list(overrides)

    def close(self) -> None:
        """Nothing to release."""


# ---------------------------------------------------------------------------
# Schema DDL
# ---------------------------------------------------------------------------

_SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS _schema_version (
    table_name VARCHAR PRIMARY KEY,
    version VARCHAR NOT NULL
);

CREATE TABLE IF NOT EXISTS overrides (
    section_id VARCHAR NOT NULL,
    position INTEGER NOT NULL,
    payload VARCHAR NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE TABLE IF NOT EXISTS notes (
    section_id VARCHAR NOT NULL,
    payload VARCHAR NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE TABLE IF NOT EXISTS settings (
    key VARCHAR NOT NULL,
    payload VARCHAR NOT NULL
)
"""


def _now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class DuckDBStore:
    """Read/write user data in a DuckDB file."""

    def __init__(
        self,
        db_path: Path | str,
        *,
        create_if_missing: bool = False,
    ) -> None:
        self._db_path = Path(db_path)
        if not self._db_path.exists() and not create_if_missing:
            raise FileNotFoundError(f"Store database not found: {self._db_path}")
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: Any = _duckdb_mod.connect(str(self._db_path))
        try:
            self._create_schema()
        except Exception:
            self._conn.close()
            raise

    def _create_schema(self) -> None:
        for stmt in _SCHEMA_DDL.split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        row = self._conn.execute(
            "SELECT version FROM _schema_version WHERE table_name = 'store'"
        ).fetchone()
        if row is None:
            self._conn.execute(
                "INSERT INTO _schema_version VALUES ('store', ?)", [SCHEMA_VERSION],
            )
        elif str(row[0]) != SCHEMA_VERSION:
            raise SchemaVersionError(
                f"Schema version mismatch in {self._db_path}: "
                f"expected {SCHEMA_VERSION}, got {row[0]}"
            )

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> DuckDBStore:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _replace_all(self, *tables: tuple[str, list[list[Any]], str]) -> None:
        """Replace the rows of each (table, rows, placeholders) in one transaction."""
        self._conn.execute("BEGIN TRANSACTION")
        try:
            for table, rows, placeholders in tables:
                self._conn.execute(f"DELETE FROM {table}")
                if rows:
                    self._conn.executemany(
                        f"INSERT INTO {table} VALUES ({placeholders})", rows,
                    )
            self._conn.execute("COMMIT")
        except Exception:
            self._conn.execute("ROLLBACK")
            raise

    # ── Overrides ────────────────────────────────────────────────────────

    def load_overrides(self) -> list[Section]:
        rows = self._conn.execute(
            "SELECT payload FROM overrides ORDER BY position"
        ).fetchall()
        return [Section.from_dict(loads(r[0])) for r in rows]

    def _override_rows(self, overrides: list[Section]) -> list[list[Any]]:
        now = _now()
        # Last occurrence of an id wins, keeping its first position.
        by_id: dict[str, Section] = {}
        for section in overrides:
            by_id[section.id] = section
        return [
            [s.id, pos, dumps_str(s.to_dict()), now]
            for pos, s in enumerate(by_id.values())
        ]

    def save_overrides(self, overrides: list[Section]) -> None:
        self._replace_all(("overrides", self._override_rows(overrides), "?, ?, ?, ?"))

    # ── Notes ────────────────────────────────────────────────────────────

    def load_notes(self) -> dict[str, Note]:
        rows = self._conn.execute(
            "SELECT section_id, payload FROM notes ORDER BY section_id"
        ).fetchall()
        return {str(r[0]): Note.from_dict(loads(r[1])) for r in rows}

    def _note_rows(self, notes: dict[str, Note]) -> list[list[Any]]:
        now = _now()
        return [
            [section_id, dumps_str(note.to_dict()), now]
            for section_id, note in notes.items()
        ]

    def save_notes(self, notes: dict[str, Note]) -> None:
        self._replace_all(("notes", self._note_rows(notes), "?, ?, ?"))

    # ── Settings ─────────────────────────────────────────────────────────

    def load_settings(self) -> Settings:
        row = self._conn.execute(
            "SELECT payload FROM settings WHERE key = 'display'"
        ).fetchone()
        if row is None:
            return Settings()
        return Settings.from_dict(loads(row[0]))

    def save_settings(self, settings: Settings) -> None:
        self._replace_all(
            ("settings", [["display", dumps_str(settings.to_dict())]], "?, ?"),
        )

    # ── Notes and overrides together ─────────────────────────────────────

    def replace_user_data(
        self, notes: dict[str, Note], overrides: list[Section],
    ) -> None:
        """Replace notes and overrides atomically; on error neither changes."""
        self._replace_all(
            ("notes", self._note_rows(notes), "?, ?, ?"),
            ("overrides", self._override_rows(overrides), "?, ?, ?, ?"),
        )


def open_store(
    db_path: Path | str | None,
    *,
    create_if_missing: bool = True,
) -> DuckDBStore | MemoryStore:
    """DuckDB store at *db_path*, or a fresh MemoryStore when no path is given."""
    if db_path is None or str(db_path) == "":
        return MemoryStore()
    return DuckDBStore(db_path, create_if_missing=create_if_missing)
