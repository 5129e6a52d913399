"""Inline cross-reference detection ("มาตรา ๑๑๒ ทวิ" inside body text).

Finds every mention of a section within arbitrary text so presentation code
can turn it into a link, and resolves a mentioned label back to a section.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from lawmate.grammar import SECTION_REF_RE
from lawmate.numerals import normalize_for_search
from lawmate.section_types import Section


@dataclass(frozen=True, slots=True)
class SectionReference:
    """A section mention at ``[start, end)`` in the scanned text."""

    number: str   # "๑๑๒ ทวิ", as written
    start: int
    end: int
    text: str     # full match, marker included


@dataclass(frozen=True, slots=True)
class TextSegment:
    """A slice of body text, either plain or a reference."""

    text: str
    reference: SectionReference | None = None


def iter_references(text: str) -> Iterator[SectionReference]:
    """Yield successive non-overlapping section mentions in *text*."""
    if not text:
        return
    for m in SECTION_REF_RE.finditer(text):
        yield SectionReference(
            number=m.group(1),
            start=m.start(),
            end=m.end(),
            text=m.group(0),
        )


def find_references(text: str) -> list[SectionReference]:
    """All section mentions in *text*, in order of appearance."""
    return list(iter_references(text))


def split_references(text: str) -> list[TextSegment]:
    """Split *text* into plain and reference segments.

    Concatenating the segment texts reproduces the input exactly.
    """
    segments: list[TextSegment] = []
    pos = 0
    for ref in iter_references(text):
        if ref.start > pos:
            segments.append(TextSegment(text[pos:ref.start]))
        segments.append(TextSegment(ref.text, ref))
        pos = ref.end
    if pos < len(text):
        segments.append(TextSegment(text[pos:]))
    return segments


def resolve_reference(
    label: str,
    sections: Iterable[Section],
    *,
    collection_id: str | None = None,
) -> Section | None:
    """Find the section addressed by *label* (a number in either digit script).

    Both sides are compared in search-normalized form. When *collection_id*
    is given only sections of that collection are candidates; the first
    candidate in iteration order wins.
    """
    target = normalize_for_search(label)
    if not target:
        return None
    for section in sections:
        if collection_id is not None and section.collection_id != collection_id:
            continue
        if normalize_for_search(section.number) == target:
            return section
    return None

