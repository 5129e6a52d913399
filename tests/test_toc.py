"""Tests for lawmate.toc module."""
from lawmate.section_types import Section
from lawmate.toc import build_toc


def _s(sid: str, category: str) -> Section:
    return Section(id=sid, number="1", body="x", category=category)


class TestBuildToc:
    def test_tree_shape(self) -> None:
        nodes = build_toc([
            _s("a", "อาญา > ภาค ๑ > หมวด ๑"),
            _s("b", "อาญา > ภาค ๑ > หมวด ๑"),
            _s("c", "อาญา > ภาค ๑ > หมวด ๒"),
            _s("d", "อาญา > ภาค ๒"),
            _s("e", "แพ่ง"),
        ])
        assert [n.label for n in nodes] == ["อาญา", "แพ่ง"]
        crim = nodes[0]
        assert crim.section_id is None
        assert [n.label for n in crim.children] == ["ภาค ๑", "ภาค ๒"]
        part1 = crim.children[0]
        assert [(n.label, n.level, n.section_id) for n in part1.children] == [
            ("หมวด ๑", 2, "a"),
            ("หมวด ๒", 2, "c"),
        ]
        assert crim.children[1].section_id == "d"
        assert nodes[1].section_id == "e"

    def test_uncategorized_skipped(self) -> None:
        assert build_toc([_s("a", "")]) == []

    def test_to_dict(self) -> None:
        (node,) = build_toc([_s("a", "X")])
        assert node.to_dict() == {"label": "X", "level": 0, "section_id": "a", "children": []}
