"""Section parser for Thai statutory raw text.

Turns loosely formatted statute text into a flat list of :class:`Section`
with:
- Outline tracking (ภาค/บรรพ > ลักษณะ > หมวด > ส่วนที่), reset downward
- Section detection (มาตรา ๑, มาตรา ๒๘๕/๑, มาตรา ๓๐ ทวิ)
- Heading continuation lines (title printed on the next physical line)
- Footnote marker stripping ([12])

Single pass, line by line. Each line is classified by a small ordered
table of (matcher, handler) rules; the first rule that claims a line wins.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from lawmate.grammar import (
    FOOTNOTE_LINE_RE,
    FOOTNOTE_RE,
    HEADING_MARKERS,
    SECTION_MARKER,
    SECTION_START_RE,
)
from lawmate.numerals import section_id
from lawmate.section_types import CATEGORY_SEPARATOR, Section

logger = logging.getLogger(__name__)

SEPARATOR_PREFIX = "=="


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


def _heading_level(line: str) -> int | None:
    """Outline level (0..3) of a heading line, or None."""
    for level, markers in enumerate(HEADING_MARKERS):
        for marker in markers:
            if line.startswith(marker + " "):
                return level
    return None


def _is_skipped(line: str) -> bool:
    """Blank lines, page separators and lone footnote indexes never become body."""
    return (
        not line
        or line.startswith(SEPARATOR_PREFIX)
        or FOOTNOTE_LINE_RE.match(line) is not None
    )


def _is_structural(line: str) -> bool:
    """True for lines that open a heading or a section."""
    return _heading_level(line) is not None or line.startswith(SECTION_MARKER + " ")


def clean_body(lines: list[str]) -> str:
    """Join body lines and strip inline footnote markers."""
    return FOOTNOTE_RE.sub("", "\n".join(lines)).strip()


# ---------------------------------------------------------------------------
# Scanner state
# ---------------------------------------------------------------------------


@dataclass
class _ScanState:
    collection_id: str
    collection_name: str
    outline: list[str] = field(default_factory=lambda: [""] * len(HEADING_MARKERS))
    number: str = ""
    body: list[str] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)

    def category(self) -> str:
        parts = [self.collection_name, *self.outline]
        return CATEGORY_SEPARATOR.join(p for p in parts if p)

    def flush(self) -> None:
        """Finalize the open section; empty bodies are dropped."""
        if not self.number:
            return
        body = clean_body(self.body)
        if body:
            self.sections.append(Section(
                id=section_id(self.collection_id, self.number),
                number=self.number,
                body=body,
                category=self.category(),
                collection_id=self.collection_id,
            ))
        else:
            logger.debug(
                "Dropping empty section %s in %s", self.number, self.collection_id,
            )
        self.number = ""
        self.body = []


# ---------------------------------------------------------------------------
# Rule handlers: each returns the number of extra lines consumed, or None
# when the line is not theirs.
# ---------------------------------------------------------------------------

_Handler = Callable[[_ScanState, str, list[str], int], "int | None"]


def _handle_skip(state: _ScanState, line: str, lines: list[str], i: int) -> int | None:
    return 0 if _is_skipped(line) else None


def _handle_heading(state: _ScanState, line: str, lines: list[str], i: int) -> int | None:
    level = _heading_level(line)
    if level is None:
        return None
    state.flush()

    consumed = 0
    value = line
    if i + 1 < len(lines):
        nxt = lines[i + 1].strip()
        if not _is_skipped(nxt) and not _is_structural(nxt):
            value = f"{value} {nxt}"
            consumed = 1

    state.outline[level] = value
    for deeper in range(level + 1, len(state.outline)):
        state.outline[deeper] = ""
    return consumed


def _handle_section_start(
    state: _ScanState, line: str, lines: list[str], i: int,
) -> int | None:
    m = SECTION_START_RE.match(line)
    if m is None:
        return None
    state.flush()
    state.number = m.group(1)
    remainder = m.group(2).strip()
    if remainder:
        state.body.append(remainder)
    return 0


def _handle_body(state: _ScanState, line: str, lines: list[str], i: int) -> int | None:
    # Text before the first section of a block has no owner and is ignored.
    if state.number:
        state.body.append(line)
    return 0


_RULES: tuple[_Handler, ...] = (
    _handle_skip,
    _handle_heading,
    _handle_section_start,
    _handle_body,
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_sections(
    text: str,
    collection_id: str,
    collection_name: str,
) -> list[Section]:
    """Parse raw statute text into sections, in source order.

    Args:
        text: Newline-delimited raw text using the มาตรา/heading markers.
        collection_id: Id of the owning collection; prefixes every section id.
        collection_name: Display name; first element of every category.

    Returns:
        List of Section. Sections whose cleaned body is empty are omitted.
        Never raises on malformed input.
    """
    if not text:
        return []

    lines = text.split("\n")
    state = _ScanState(collection_id=collection_id, collection_name=collection_name)

    i = 0
    while i < len(lines):
        line = lines[i].strip()
        for rule in _RULES:
            consumed = rule(state, line, lines, i)
            if consumed is not None:
                i += consumed
                break
        i += 1

    state.flush()
    logger.debug(
        "Parsed %d sections from %s (%d lines)",
        len(state.sections), collection_id, len(lines),
    )
    return state.sections
