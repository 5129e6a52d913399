"""Note lifecycle and highlight-span editing.

Notes are owned separately from sections and keyed by section id. A note
that holds no text, no flag and no highlight spans is removed on save
rather than stored as an empty record. The span helpers leave
``updated_at`` alone; the library stamps notes when they are saved.
"""
from __future__ import annotations

import time
from dataclasses import replace

from lawmate.section_types import (
    DEFAULT_HIGHLIGHT_COLOR,
    HIGHLIGHT_COLORS,
    Note,
    TextHighlight,
)


def now_ms() -> int:
    return int(time.time() * 1000)


def apply_note(notes: dict[str, Note], note: Note) -> dict[str, Note]:
    """Return *notes* with *note* upserted, or its entry dropped if empty."""
    updated = dict(notes)
    if note.is_empty:
        updated.pop(note.section_id, None)
    else:
        updated[note.section_id] = note
    return updated


def add_highlight(note: Note, start: int, end: int, color: str = DEFAULT_HIGHLIGHT_COLOR) -> Note:
    """Add a span, replacing any existing span it overlaps.

    Spans stay sorted by start offset. An empty or inverted range leaves
    the note unchanged.
    """
    if end <= start:
        return note
    if color not in HIGHLIGHT_COLORS:
        color = DEFAULT_HIGHLIGHT_COLOR
    kept = [h for h in note.highlights if not h.overlaps(start, end)]
    kept.append(TextHighlight(start=start, end=end, color=color))
    kept.sort(key=lambda h: h.start)
    return replace(note, highlights=tuple(kept))


def clear_highlights(note: Note, start: int, end: int) -> Note:
    """Remove every span overlapping ``[start, end)``."""
    kept = tuple(h for h in note.highlights if not h.overlaps(start, end))
    if kept == note.highlights:
        return note
    return replace(note, highlights=kept)

