"""Shared fixtures: a small two-collection library over an in-memory store."""
from __future__ import annotations

import pytest

from lawmate.library import LawLibrary
from lawmate.section_parser import parse_sections
from lawmate.section_types import Section
from lawmate.store import MemoryStore

CRIM_TEXT = """ภาค ๑
บทบัญญัติทั่วไป
มาตรา ๑๑๓ ผู้ใดกระทำความผิดฐานกบฏ
มาตรา ๑๑๒ ทวิ ความผิดตามมาตรา ๑๑๒ ถ้ากระทำโดยการโฆษณา
มาตรา ๑๑๒ ผู้ใดหมิ่นประมาทพระมหากษัตริย์
มาตรา ๒๘๕/๒ บทเพิ่มเติมที่สอง
มาตรา ๒๘๕/๑ บทเพิ่มเติมที่หนึ่ง
"""

CIVIL_TEXT = """บรรพ ๑
หลักทั่วไป
มาตรา ๑ ประมวลกฎหมายนี้เรียกว่าประมวลกฎหมายแพ่งและพาณิชย์
"""

FIXED_NOW = 1_700_000_000_000


def make_builtins() -> tuple[Section, ...]:
    # Civil first on purpose: display order must follow collection priority.
    return tuple(
        parse_sections(CIVIL_TEXT, "civil", "ประมวลกฎหมายแพ่งและพาณิชย์")
        + parse_sections(CRIM_TEXT, "crim", "ประมวลกฎหมายอาญา")
    )


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def library(store: MemoryStore) -> LawLibrary:
    builtins = make_builtins()
    return LawLibrary(store, builtin_loader=lambda: builtins, clock=lambda: FIXED_NOW)
