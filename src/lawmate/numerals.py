"""Numeral and suffix normalization for Thai statutory section labels.

Section labels mix Thai digits (``๑๑๒``) and Arabic digits (``112``) and may
carry an ordinal suffix marking an inserted section (``30 ทวิ``). This module
provides the digit mapping, the search normalization, and the ordering key
used everywhere sections are sorted or compared.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

THAI_DIGITS = "๐๑๒๓๔๕๖๗๘๙"

_DIGIT_TABLE = str.maketrans(THAI_DIGITS, "0123456789")

# Ordinal suffix tokens in insertion order. Rank 5 is unused.
SUFFIX_RANKS: tuple[tuple[str, int], ...] = (
    ("ทวิ", 1),
    ("ตรี", 2),
    ("จัตวา", 3),
    ("เบญจ", 4),
    ("ฉ", 6),
    ("สัตต", 7),
    ("อัฏฐ", 8),
    ("นว", 9),
    ("ทศ", 10),
)

VALID_SUFFIXES: tuple[str, ...] = tuple(token for token, _ in SUFFIX_RANKS)

_WS_RE = re.compile(r"\s+")
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


@dataclass(frozen=True, slots=True, order=True)
class SortKey:
    """Ordering key for a section label: compare main, then sub, then suffix."""

    main: float
    sub: float
    suffix_rank: int


def to_standard_digits(text: str | None) -> str:
    """Map Thai digits to ASCII digits; everything else passes through."""
    if not text:
        return ""
    return text.translate(_DIGIT_TABLE)


def normalize_for_search(text: str | None) -> str:
    """Standard digits, lowercased, with all whitespace removed."""
    if not text:
        return ""
    return _WS_RE.sub("", to_standard_digits(text).lower())


def normalize_section_number(number: str | None) -> str:
    """Id-safe form of a section label: ``"๒๘๕/๑"`` -> ``"285-1"``."""
    std = to_standard_digits(number)
    return _WS_RE.sub("-", std.replace("/", "-"))


def section_id(collection_id: str, number: str) -> str:
    """Deterministic id of a built-in section within its collection."""
    return f"{collection_id}-{normalize_section_number(number)}"


def _parse_number(text: str) -> float:
    # Leading numeric prefix, like a lenient float parse; anything else is 0.
    m = _LEADING_NUMBER_RE.match(text)
    if m is None:
        return 0.0
    try:
        return float(m.group(1))
    except ValueError:
        return 0.0


def build_sort_key(number: str | None) -> SortKey:
    """Parse a section label into its ordering key.

    The first suffix token found (table order, substring containment) sets
    the suffix rank and is removed before the numeric parse. A ``/`` splits
    the remainder into main and sub parts. Unparseable parts become 0.
    """
    clean = to_standard_digits(number).strip()
    suffix_rank = 0
    for token, rank in SUFFIX_RANKS:
        if token in clean:
            suffix_rank = rank
            clean = clean.replace(token, "", 1).strip()
            break

    if "/" in clean:
        parts = clean.split("/")
        return SortKey(_parse_number(parts[0]), _parse_number(parts[1]), suffix_rank)
    return SortKey(_parse_number(clean), 0.0, suffix_rank)


def highlight_pattern(query: str | None) -> re.Pattern[str] | None:
    """Compile a case-insensitive pattern matching *query* in either digit script.

    Each digit of the query matches both its Arabic and Thai forms, so a
    search for ``112`` highlights ``๑๑๒`` in the text and vice versa.
    """
    trimmed = (query or "").strip()
    if not trimmed:
        return None
    parts: list[str] = []
    for ch in trimmed:
        std = to_standard_digits(ch)
        if std.isascii() and std.isdigit():
            parts.append(f"[{std}{THAI_DIGITS[int(std)]}]")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE)
