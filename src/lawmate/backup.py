"""Export, import and reset of user data (notes and overrides).

Export document shape::

    {"version": 1, "timestamp": <epoch ms>,
     "notes": {<section id>: <note>, ...},
     "overrides": [<section>, ...]}

Import accepts a document only when ``notes`` is an object and
``overrides`` is an array, and only when every record decodes; otherwise
nothing is written.
"""
from __future__ import annotations

import logging
from typing import Any

from lawmate.io_utils import JSONDecodeError, dumps, loads
from lawmate.notes import now_ms
from lawmate.section_types import Note, Section
from lawmate.store import PersistencePort

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


def build_backup(store: PersistencePort, *, timestamp: int | None = None) -> dict[str, Any]:
    """Snapshot of notes and overrides as a plain dict."""
    return {
        "version": BACKUP_VERSION,
        "timestamp": now_ms() if timestamp is None else timestamp,
        "notes": {k: n.to_dict() for k, n in store.load_notes().items()},
        "overrides": [s.to_dict() for s in store.load_overrides()],
    }


def export_data(store: PersistencePort, *, timestamp: int | None = None) -> bytes:
    """Serialize the backup document as indented JSON."""
    return dumps(build_backup(store, timestamp=timestamp), pretty=True)


def _decode(payload: Any) -> tuple[dict[str, Note], list[Section]] | None:
    if not isinstance(payload, dict):
        return None
    raw_notes = payload.get("notes")
    raw_overrides = payload.get("overrides")
    if not isinstance(raw_notes, dict) or not isinstance(raw_overrides, list):
        return None
    try:
        notes: dict[str, Note] = {}
        for key, value in raw_notes.items():
            if not isinstance(value, dict):
                return None
            notes[str(key)] = Note.from_dict({**value, "section_id": key})
        overrides = [Section.from_dict(item) for item in raw_overrides]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Backup record could not be decoded: %s", exc)
        return None
    return notes, overrides


def import_data(store: PersistencePort, raw: bytes | str) -> bool:
    """Replace notes and overrides from a backup document.

    Returns False (and leaves the store untouched) on malformed JSON or a
    wrong document shape.
    """
    try:
        payload = loads(raw)
    except JSONDecodeError as exc:
        logger.warning("Import failed: %s", exc)
        return False

    decoded = _decode(payload)
    if decoded is None:
        logger.warning("Invalid backup format")
        return False

    notes, overrides = decoded
    store.replace_user_data(notes, overrides)
    logger.info("Imported %d notes and %d overrides", len(notes), len(overrides))
    return True


def reset_data(store: PersistencePort) -> None:
    """Remove all notes and overrides; settings are kept."""
    store.replace_user_data({}, [])
