"""Assembled law library: built-in sections merged with user overrides.

Merge contract: built-ins are inserted first, overrides second, into one
id-keyed mapping, so an override always replaces the built-in that shares
its id. The merged sections are then ordered by collection priority and,
within a collection, by section-number sort key. Ad-hoc custom sections
(overrides with no collection) come last.

All user state goes through the injected :class:`PersistencePort`; each
mutation reads the full current state, applies one change and writes the
full state back.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from typing import Any

from lawmate.catalog import COLLECTIONS, builtin_sections
from lawmate.diff import DiffPart, compute_diff
from lawmate.notes import apply_note, now_ms
from lawmate.numerals import SortKey, build_sort_key, to_standard_digits
from lawmate.numerals import section_id as make_section_id
from lawmate.references import find_references, resolve_reference
from lawmate.section_types import Collection, Note, Section, SectionInput, Settings
from lawmate.store import PersistencePort

logger = logging.getLogger(__name__)

CUSTOM_COLLECTION_ID = "custom"
CUSTOM_ID_PREFIX = "custom-"
DEFAULT_CUSTOM_CATEGORY = "กฎหมายเพิ่มเติม"


# ---------------------------------------------------------------------------
# Merge and ordering
# ---------------------------------------------------------------------------


def merge_sections(
    builtins: Iterable[Section],
    overrides: Iterable[Section],
) -> dict[str, Section]:
    """Merge by id: built-ins first, then overrides (override wins)."""
    merged: dict[str, Section] = {}
    for section in builtins:
        merged[section.id] = section
    for section in overrides:
        merged[section.id] = section
    return merged


def section_order_key(
    section: Section,
    priorities: dict[str, int],
) -> tuple[int, bool, SortKey]:
    """Sort key: collection priority, ad-hoc flag, then section number.

    Unknown or missing collections share the lowest priority; overrides
    without any collection sort after everything else.
    """
    priority = priorities.get(section.collection_id or "", len(priorities))
    adhoc = section.is_override and not section.collection_id
    return (priority, adhoc, build_sort_key(section.number))


def sort_sections(
    sections: Iterable[Section],
    collections: Sequence[Collection] = COLLECTIONS,
) -> list[Section]:
    """Deterministic display order for *sections*."""
    priorities = {c.id: i for i, c in enumerate(collections)}
    return sorted(sections, key=lambda s: section_order_key(s, priorities))


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


class LawLibrary:
    """Read and edit the assembled collection of sections."""

    def __init__(
        self,
        store: PersistencePort,
        *,
        collections: Sequence[Collection] = COLLECTIONS,
        builtin_loader: Callable[[], Sequence[Section]] = builtin_sections,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._store = store
        self._collections = tuple(collections)
        self._builtin_loader = builtin_loader
        self._clock = clock

    @property
    def store(self) -> PersistencePort:
        return self._store

    @property
    def collections(self) -> tuple[Collection, ...]:
        return self._collections

    def get_collection(self, collection_id: str | None) -> Collection | None:
        for c in self._collections:
            if c.id == collection_id:
                return c
        return None

    # ── Reads ────────────────────────────────────────────────────────────

    def builtins(self) -> Sequence[Section]:
        return self._builtin_loader()

    def original_section(self, section_id: str) -> Section | None:
        """The shipped section for an id, ignoring overrides."""
        for section in self.builtins():
            if section.id == section_id:
                return section
        return None

    def sections(self) -> list[Section]:
        """Built-ins merged with overrides, in display order."""
        merged = merge_sections(self.builtins(), self._store.load_overrides())
        return sort_sections(merged.values(), self._collections)

    def get_section(self, section_id: str) -> Section | None:
        merged = merge_sections(self.builtins(), self._store.load_overrides())
        return merged.get(section_id)

    def is_modified(self, section_id: str) -> bool:
        """True when an override shadows an existing built-in."""
        if self.original_section(section_id) is None:
            return False
        return any(s.id == section_id for s in self._store.load_overrides())

    def diff_override(self, section_id: str) -> list[DiffPart] | None:
        """Word diff from the built-in body to the override body."""
        original = self.original_section(section_id)
        if original is None:
            return None
        for override in self._store.load_overrides():
            if override.id == section_id:
                return compute_diff(original.body, override.body)
        return None

    # ── Overrides ────────────────────────────────────────────────────────

    def _mint_custom_id(self, taken: set[str]) -> str:
        stamp = self._clock()
        while f"{CUSTOM_ID_PREFIX}{stamp}" in taken:
            stamp += 1
        return f"{CUSTOM_ID_PREFIX}{stamp}"

    def save_override(self, data: SectionInput) -> Section:
        """Create or update an override and return it with its resolved id.

        Without an explicit id, a real collection id yields the same id the
        built-in with that number has (or would have), so editing a built-in
        by number shadows it. Otherwise a fresh time-based id is minted.

        Raises:
            ValueError: if the number or the body is blank.
        """
        overrides = self._store.load_overrides()
        number = to_standard_digits(data.number).strip()
        if not number:
            raise ValueError("Section number must not be empty")
        if not data.body.strip():
            raise ValueError(f"Section body must not be empty: {number}")

        resolved_id = data.id
        if not resolved_id and data.collection_id and data.collection_id != CUSTOM_COLLECTION_ID:
            resolved_id = make_section_id(data.collection_id, number)

        if resolved_id:
            previous = self.get_section(resolved_id)
            collection_id = data.collection_id or (previous.collection_id if previous else None)
            category = data.category or (previous.category if previous else "")
            if not category:
                collection = self.get_collection(collection_id)
                category = collection.name if collection else ""
            section = Section(
                id=resolved_id,
                number=number,
                body=data.body,
                category=category,
                is_override=True,
                collection_id=collection_id,
            )
        else:
            section = Section(
                id=self._mint_custom_id({s.id for s in overrides}),
                number=number,
                body=data.body,
                category=data.category or DEFAULT_CUSTOM_CATEGORY,
                is_override=True,
                collection_id=data.collection_id,
            )

        for i, existing in enumerate(overrides):
            if existing.id == section.id:
                overrides[i] = section
                break
        else:
            overrides.append(section)

        self._store.save_overrides(overrides)
        logger.info("Saved override %s", section.id)
        return section

    def revert_override(self, section_id: str) -> bool:
        """Drop the override for an id; the built-in, if any, shows again.

        Returns True when an override was removed.
        """
        overrides = self._store.load_overrides()
        kept = [s for s in overrides if s.id != section_id]
        removed = len(kept) != len(overrides)
        self._store.save_overrides(kept)
        if removed:
            logger.info("Reverted override %s", section_id)
        return removed

    def delete_section(self, section_id: str) -> bool:
        """Delete a custom section (same as reverting its override)."""
        return self.revert_override(section_id)

    # ── Notes and settings ───────────────────────────────────────────────

    def notes(self) -> dict[str, Note]:
        return self._store.load_notes()

    def get_note(self, section_id: str) -> Note:
        """Stored note for a section, or a blank one."""
        return self._store.load_notes().get(section_id) or Note(section_id=section_id)

    def save_note(self, note: Note) -> dict[str, Note]:
        """Upsert a note stamped with the library clock (dropping it when
        empty); returns all notes."""
        note = replace(note, updated_at=self._clock())
        updated = apply_note(self._store.load_notes(), note)
        self._store.save_notes(updated)
        return updated

    def settings(self) -> Settings:
        return self._store.load_settings()

    def save_settings(self, settings: Settings) -> None:
        self._store.save_settings(settings)

    # ── Views ────────────────────────────────────────────────────────────

    def section_view(self, section_id: str) -> dict[str, Any] | None:
        """JSON-ready detail of one section: references resolved within its
        collection, note, and the shipped original with a diff when overridden."""
        sections = self.sections()
        section = next((s for s in sections if s.id == section_id), None)
        if section is None:
            return None
        refs = []
        for ref in find_references(section.body):
            target = resolve_reference(
                ref.number, sections, collection_id=section.collection_id,
            )
            refs.append({
                "number": ref.number,
                "start": ref.start,
                "end": ref.end,
                "target_id": target.id if target else None,
            })
        note = self.notes().get(section.id)
        original = self.original_section(section.id) if section.is_override else None
        diff = self.diff_override(section.id)
        return {
            **section.to_dict(),
            "references": refs,
            "note": note.to_dict() if note else None,
            "modified": original is not None,
            "original": original.to_dict() if original else None,
            "diff": [{"kind": p.kind, "value": p.value} for p in diff] if diff is not None else None,
        }
