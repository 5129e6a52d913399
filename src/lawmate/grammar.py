"""Section-number grammar shared by the parser and the reference detector.

Both section-start lines (``มาตรา ๓๐ ทวิ ...``) and inline mentions
(``...ตามมาตรา ๓๐ ทวิ...``) are recognized from the single definition in
:func:`section_pattern`, so a grammar change reaches both call sites.
"""
from __future__ import annotations

import re

from lawmate.numerals import THAI_DIGITS, VALID_SUFFIXES

SECTION_MARKER = "มาตรา"

# Heading markers per outline level: Part, Title, Chapter, Subpart.
HEADING_MARKERS: tuple[tuple[str, ...], ...] = (
    ("ภาค", "บรรพ"),
    ("ลักษณะ",),
    ("หมวด",),
    ("ส่วนที่",),
)

_DIGIT_CLASS = f"[0-9{THAI_DIGITS}]"
_SUFFIX_ALT = "|".join(
    re.escape(s) for s in sorted(VALID_SUFFIXES, key=len, reverse=True)
)

# A suffix only counts when followed by whitespace, light punctuation or end.
NUMBER_PATTERN = (
    rf"{_DIGIT_CLASS}+(?:/{_DIGIT_CLASS}+)?"
    rf"(?:\s+(?:{_SUFFIX_ALT})(?=[\s.,;:)\]]|$))?"
)

FOOTNOTE_PATTERN = rf"\[{_DIGIT_CLASS}+\]"


def section_pattern(*, anchored: bool) -> re.Pattern[str]:
    """Compile the section-number grammar.

    anchored=True matches a whole section-start line: group 1 is the number
    (with any suffix), group 2 the rest of the line. anchored=False finds
    mentions anywhere in body text: group 1 is the number.
    """
    if anchored:
        return re.compile(rf"^{SECTION_MARKER}\s+({NUMBER_PATTERN})(.*)$")
    return re.compile(rf"{SECTION_MARKER}\s*({NUMBER_PATTERN})")


SECTION_START_RE = section_pattern(anchored=True)
SECTION_REF_RE = section_pattern(anchored=False)
FOOTNOTE_RE = re.compile(FOOTNOTE_PATTERN)
FOOTNOTE_LINE_RE = re.compile(rf"^{FOOTNOTE_PATTERN}$")
