"""Built-in statute collections and their parsed sections.

The collection list order is the display/priority order used when sorting
the assembled library. Raw text lives in ``data/<collection_id>.txt`` next
to this module; parsing is pure, so the parsed result is memoized for the
life of the process.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from lawmate.section_parser import parse_sections
from lawmate.section_types import Collection, Section

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"

_SOURCE_BASE = "https://searchlaw.ocs.go.th/council-of-state/#/public/doc/"
_LAST_UPDATED = "10 ก.พ. 2567"

COLLECTIONS: tuple[Collection, ...] = (
    Collection(
        id="crim",
        name="ประมวลกฎหมายอาญา",
        abbreviation="ป.อ.",
        description="ความผิดและโทษทางอาญา",
        source_url=_SOURCE_BASE + "cGFqZ1lmZFpjSzUyM3BFY0Z2TVJ0Zz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="civil",
        name="ประมวลกฎหมายแพ่งและพาณิชย์",
        abbreviation="ป.พ.พ.",
        description="นิติกรรม สัญญา หนี้ เอกเทศสัญญา ทรัพย์สิน ครอบครัว มรดก",
        source_url=_SOURCE_BASE + "Qko1NGNVa1FhMG9hTTNGcU9sTGxydz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="civil_proc",
        name="ประมวลกฎหมายวิธีพิจารณาความแพ่ง",
        abbreviation="ป.วิ.พ.",
        description="กระบวนพิจารณาคดีแพ่ง",
        source_url=_SOURCE_BASE + "VjZQcUR4VG1iVHZGS09TMUMvY2Vsdz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="crim_proc",
        name="ประมวลกฎหมายวิธีพิจารณาความอาญา",
        abbreviation="ป.วิ.อ.",
        description="กระบวนพิจารณาคดีอาญา",
        source_url=_SOURCE_BASE + "UVdzUTNzUFZlT3VBOEw2allVWTZxZz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="const",
        name="รัฐธรรมนูญแห่งราชอาณาจักรไทย",
        abbreviation="รธน.",
        description="กฎหมายสูงสุดของประเทศ",
        source_url=_SOURCE_BASE + "VG9mbS9RRXZhdjNGYy9Xcm5LTjd1Zz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="bankruptcy",
        name="พระราชบัญญัติล้มละลาย",
        abbreviation="พ.ร.บ. ล้มละลาย",
        description="กระบวนการล้มละลายและการฟื้นฟูกิจการ",
        source_url=_SOURCE_BASE + "dWNDc0pxS3NteHBmaHJoTE9KakhKdz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="kwaeng",
        name="พ.ร.บ. จัดตั้งศาลแขวงและวิธีพิจารณาความอาญาในศาลแขวง",
        abbreviation="ศาลแขวง",
        description="กระบวนพิจารณาคดีอาญาศาลแขวง",
        source_url=_SOURCE_BASE + "SUlSbFpqUG95RlJ6RDd2c3BKSXBWdz09",
        last_updated=_LAST_UPDATED,
    ),
    Collection(
        id="court_const",
        name="พระธรรมนูญศาลยุติธรรม",
        abbreviation="พระธรรมนูญ",
        description="เขตอำนาจศาลและผู้พิพากษา",
        source_url=_SOURCE_BASE + "b2oxcEd6U0M2bzhQVktyQmFRaEVLdz09",
        last_updated=_LAST_UPDATED,
    ),
)


def load_raw_text(collection_id: str, *, data_dir: Path = DATA_DIR) -> str:
    """Raw statute text for a collection; empty when no source file ships."""
    path = data_dir / f"{collection_id}.txt"
    if not path.exists():
        logger.warning("No raw text for collection %s at %s", collection_id, path)
        return ""
    return path.read_text(encoding="utf-8")


def parse_collection(collection: Collection, *, data_dir: Path = DATA_DIR) -> list[Section]:
    """Parse one collection's raw text."""
    return parse_sections(
        load_raw_text(collection.id, data_dir=data_dir),
        collection.id,
        collection.name,
    )


@lru_cache(maxsize=1)
def builtin_sections() -> tuple[Section, ...]:
    """Parsed sections of every built-in collection, in collection order."""
    sections: list[Section] = []
    for collection in COLLECTIONS:
        sections.extend(parse_collection(collection))
    logger.debug("Loaded %d built-in sections", len(sections))
    return tuple(sections)
