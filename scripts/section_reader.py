#!/usr/bin/env python3
"""List the sections of a collection, or read one section with its references.

Usage:
    # List all sections of the criminal code
    python3 scripts/section_reader.py --collection crim

    # Read one section (either digit script works)
    python3 scripts/section_reader.py --collection crim --section "112 ทวิ"

    # Include user overrides/notes from a store, and show the outline
    python3 scripts/section_reader.py --db data/lawmate.duckdb --collection crim --toc
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from lawmate.library import LawLibrary
from lawmate.references import resolve_reference
from lawmate.store import open_store
from lawmate.toc import build_toc

log = logging.getLogger("section_reader")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List or read statute sections with cross-references."
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Path to the user-data DuckDB store (overrides and notes).",
    )
    parser.add_argument(
        "--collection", default=None,
        help="Collection id (e.g. 'crim'). Omit to cover every collection.",
    )
    parser.add_argument(
        "--section", default=None,
        help="Section number to read (e.g. '112', '๒๘๕/๑', '30 ทวิ').",
    )
    parser.add_argument(
        "--toc", action="store_true",
        help="Print the heading outline instead of the section list.",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def run(args: argparse.Namespace) -> int:
    store = open_store(args.db)
    try:
        library = LawLibrary(store)
        if args.collection and library.get_collection(args.collection) is None:
            log.warning("Unknown collection %s", args.collection)

        sections = [
            s for s in library.sections()
            if args.collection is None or s.collection_id == args.collection
        ]

        if args.section:
            section = resolve_reference(
                args.section, sections, collection_id=args.collection,
            )
            if section is None:
                print(f"Error: section not found: {args.section}", file=sys.stderr)
                return 1
            dump_json(library.section_view(section.id))
            return 0

        if args.toc:
            dump_json([node.to_dict() for node in build_toc(sections)])
            return 0

        dump_json({
            "collection": args.collection,
            "total": len(sections),
            "sections": [
                {
                    "id": s.id,
                    "number": s.number,
                    "category": s.category,
                    "is_override": s.is_override,
                }
                for s in sections
            ],
        })
        return 0
    finally:
        store.close()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    main()
