"""Outline tree built from section category breadcrumbs."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from lawmate.section_types import CATEGORY_SEPARATOR, Section


@dataclass
class TocNode:
    label: str
    level: int
    section_id: str | None = None  # first section whose breadcrumb ends here
    children: list[TocNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "label": self.label,
            "level": self.level,
            "section_id": self.section_id,
            "children": [c.to_dict() for c in self.children],
        }


def build_toc(sections: Iterable[Section]) -> list[TocNode]:
    """Fold each section's category path into a tree, preserving first-seen order."""
    root: list[TocNode] = []
    for section in sections:
        if not section.category:
            continue
        parts = section.category.split(CATEGORY_SEPARATOR)
        level_nodes = root
        for depth, part in enumerate(parts):
            node = next((n for n in level_nodes if n.label == part), None)
            if node is None:
                node = TocNode(label=part, level=depth)
                level_nodes.append(node)
            if depth == len(parts) - 1 and node.section_id is None:
                node.section_id = section.id
            level_nodes = node.children
    return root
