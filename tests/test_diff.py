"""Tests for lawmate.diff module."""
from lawmate.diff import DiffPart, compute_diff, tokenize


def _rebuild(parts: list[DiffPart], skip: str) -> str:
    return "".join(p.value for p in parts if p.kind != skip)


class TestTokenize:
    def test_keeps_separators(self) -> None:
        assert tokenize("abc def, ghi") == ["abc", " ", "def", ",", " ", "ghi"]

    def test_rejoins(self) -> None:
        text = "ผู้ใดฆ่าผู้อื่น ต้องระวางโทษ (๑) ประหารชีวิต"
        assert "".join(tokenize(text)) == text


class TestComputeDiff:
    def test_identical(self) -> None:
        parts = compute_diff("a b", "a b")
        assert all(p.kind == "equal" for p in parts)

    def test_rebuilds_both_sides(self) -> None:
        old = "ต้องระวางโทษจำคุก 3 ปี หรือปรับ 6000 บาท"
        new = "ต้องระวางโทษจำคุก 5 ปี หรือปรับ 10000 บาท"
        parts = compute_diff(old, new)
        assert _rebuild(parts, "insert") == old
        assert _rebuild(parts, "delete") == new

    def test_changed_word(self) -> None:
        parts = compute_diff("pay 3 years", "pay 5 years")
        assert DiffPart("delete", "3") in parts
        assert DiffPart("insert", "5") in parts

    def test_empty_sides(self) -> None:
        assert compute_diff("", "") == []
        assert compute_diff("", "x") == [DiffPart("insert", "x")]
        assert compute_diff("x", "") == [DiffPart("delete", "x")]
