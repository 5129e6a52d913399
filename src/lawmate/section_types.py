"""Data types for sections, collections, notes and settings.

All types are frozen dataclasses. ``to_dict``/``from_dict`` define the JSON
shape used by the stores and by export/import documents.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

CATEGORY_SEPARATOR = " > "

HIGHLIGHT_COLORS: tuple[str, ...] = ("yellow", "green", "blue", "pink", "red")
DEFAULT_HIGHLIGHT_COLOR = "yellow"

FONT_STYLES: tuple[str, ...] = ("modern", "traditional")
MIN_FONT_SIZE = 1
MAX_FONT_SIZE = 5


@dataclass(frozen=True, slots=True)
class Section:
    """One numbered unit of statutory text (a มาตรา)."""

    id: str
    number: str         # native-script label: "112", "๒๘๕/๑", "๓๐ ทวิ"
    body: str
    category: str = ""  # "ประมวลกฎหมายอาญา > ภาค ๑ ..." breadcrumb
    is_override: bool = False
    collection_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "body": self.body,
            "category": self.category,
            "is_override": self.is_override,
            "collection_id": self.collection_id,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Section:
        return cls(
            id=str(d["id"]),
            number=str(d.get("number") or ""),
            body=str(d.get("body") or ""),
            category=str(d.get("category") or ""),
            is_override=bool(d.get("is_override", False)),
            collection_id=d.get("collection_id") or None,
        )


@dataclass(frozen=True, slots=True)
class Collection:
    """Static metadata for one built-in statute (a "book")."""

    id: str
    name: str
    abbreviation: str
    description: str = ""
    source_url: str = ""
    last_updated: str = ""


@dataclass(frozen=True, slots=True)
class TextHighlight:
    """A colored span ``[start, end)`` over a section body."""

    start: int
    end: int
    color: str = DEFAULT_HIGHLIGHT_COLOR

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and self.end > start

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "color": self.color}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TextHighlight:
        color = str(d.get("color") or DEFAULT_HIGHLIGHT_COLOR)
        if color not in HIGHLIGHT_COLORS:
            color = DEFAULT_HIGHLIGHT_COLOR
        return cls(start=int(d["start"]), end=int(d["end"]), color=color)


@dataclass(frozen=True, slots=True)
class Note:
    """User annotation keyed by ``Section.id``."""

    section_id: str
    text: str = ""
    is_highlighted: bool = False
    highlights: tuple[TextHighlight, ...] = ()
    updated_at: int = 0  # epoch ms

    @property
    def has_text(self) -> bool:
        return bool(self.text and self.text.strip())

    @property
    def is_empty(self) -> bool:
        """True when the note carries nothing worth storing."""
        return not self.has_text and not self.is_highlighted and not self.highlights

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_id": self.section_id,
            "text": self.text,
            "is_highlighted": self.is_highlighted,
            "highlights": [h.to_dict() for h in self.highlights],
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Note:
        return cls(
            section_id=str(d["section_id"]),
            text=str(d.get("text") or ""),
            is_highlighted=bool(d.get("is_highlighted", False)),
            highlights=tuple(
                TextHighlight.from_dict(h) for h in d.get("highlights") or ()
            ),
            updated_at=int(d.get("updated_at") or 0),
        )


@dataclass(frozen=True, slots=True)
class Settings:
    """Display preferences."""

    dark_mode: bool = False
    font_size: int = 2
    font_style: str = "modern"

    def __post_init__(self) -> None:
        size = min(MAX_FONT_SIZE, max(MIN_FONT_SIZE, int(self.font_size)))
        object.__setattr__(self, "font_size", size)
        if self.font_style not in FONT_STYLES:
            object.__setattr__(self, "font_style", FONT_STYLES[0])

    def to_dict(self) -> dict[str, Any]:
        return {
            "dark_mode": self.dark_mode,
            "font_size": self.font_size,
            "font_style": self.font_style,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        return cls(
            dark_mode=bool(d.get("dark_mode", False)),
            font_size=int(d.get("font_size", 2)),
            font_style=str(d.get("font_style") or "modern"),
        )


@dataclass(frozen=True, slots=True)
class SectionInput:
    """Fields supplied when creating or editing a section."""

    number: str
    body: str
    category: str = ""
    collection_id: str | None = None
    id: str | None = None
