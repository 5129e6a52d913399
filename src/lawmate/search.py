"""Scope, view-mode and query filtering over the assembled sections.

Matching is plain substring containment after :func:`normalize_for_search`,
so it ignores case, whitespace and digit script. No ranking or stemming.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from lawmate.numerals import highlight_pattern, normalize_for_search
from lawmate.section_types import Note, Section


class ViewMode(str, Enum):
    ALL = "all"
    NOTES = "notes"
    FLAGGED = "flagged"
    SEARCH = "search"


def section_matches(section: Section, normalized_query: str) -> bool:
    """True if the (already normalized) query occurs in number, body or category."""
    return (
        normalized_query in normalize_for_search(section.number)
        or normalized_query in normalize_for_search(section.body)
        or normalized_query in normalize_for_search(section.category)
    )


def filter_sections(
    sections: Iterable[Section],
    notes: Mapping[str, Note],
    *,
    query: str = "",
    mode: ViewMode = ViewMode.ALL,
    collection_id: str | None = None,
) -> list[Section]:
    """Filter sections for display, keeping their input order.

    Notes and flagged modes ignore the query. In search mode an empty
    query yields nothing; in other modes it passes everything through.
    """
    scoped = [
        s for s in sections
        if collection_id is None or s.collection_id == collection_id
    ]

    if mode is ViewMode.NOTES:
        return [s for s in scoped if s.id in notes and notes[s.id].has_text]
    if mode is ViewMode.FLAGGED:
        return [s for s in scoped if s.id in notes and notes[s.id].is_highlighted]

    if not query.strip():
        return [] if mode is ViewMode.SEARCH else scoped

    q = normalize_for_search(query)
    return [s for s in scoped if section_matches(s, q)]


def find_highlight_spans(text: str, query: str) -> list[tuple[int, int]]:
    """Spans of *query* in *text*, matching either digit script."""
    pattern = highlight_pattern(query)
    if pattern is None:
        return []
    return [(m.start(), m.end()) for m in pattern.finditer(text)]
