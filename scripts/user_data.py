#!/usr/bin/env python3
"""Manage user data in a store: overrides, export/import, reset.

Usage:
    # Edit a built-in section by number (shadows the shipped text)
    python3 scripts/user_data.py --db data/lawmate.duckdb override \
        --collection crim --number 112 --body-file new_112.txt

    # Restore the shipped text
    python3 scripts/user_data.py --db data/lawmate.duckdb revert crim-112

    # Backup and restore
    python3 scripts/user_data.py --db data/lawmate.duckdb export backup.json
    python3 scripts/user_data.py --db data/lawmate.duckdb import backup.json

    # Drop all notes and overrides
    python3 scripts/user_data.py --db data/lawmate.duckdb reset
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from lawmate.backup import export_data, import_data, reset_data
from lawmate.library import LawLibrary
from lawmate.section_types import SectionInput
from lawmate.store import DuckDBStore

log = logging.getLogger("user_data")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage lawmate user data.")
    parser.add_argument(
        "--db", required=True, type=Path, help="Path to the user-data DuckDB store",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p_override = sub.add_parser("override", help="Create or update an override")
    p_override.add_argument("--number", required=True, help="Section number")
    p_override.add_argument("--collection", default=None, help="Collection id")
    p_override.add_argument("--id", default=None, help="Explicit section id")
    p_override.add_argument("--category", default="", help="Category breadcrumb")
    body = p_override.add_mutually_exclusive_group(required=True)
    body.add_argument("--body", default=None, help="Section text")
    body.add_argument("--body-file", type=Path, default=None, help="File with section text")

    p_revert = sub.add_parser("revert", help="Remove an override by id")
    p_revert.add_argument("section_id")

    p_export = sub.add_parser("export", help="Write a backup document")
    p_export.add_argument("output", type=Path)

    p_import = sub.add_parser("import", help="Replace user data from a backup")
    p_import.add_argument("input", type=Path)

    sub.add_parser("reset", help="Delete all notes and overrides")
    return parser


def run(args: argparse.Namespace) -> int:
    with DuckDBStore(args.db, create_if_missing=True) as store:
        if args.command == "override":
            text = args.body if args.body is not None else args.body_file.read_text(encoding="utf-8")
            try:
                section = LawLibrary(store).save_override(SectionInput(
                    number=args.number,
                    body=text,
                    category=args.category,
                    collection_id=args.collection,
                    id=args.id,
                ))
            except ValueError as exc:
                print(f"Error: {exc}", file=sys.stderr)
                return 1
            sys.stdout.buffer.write(
                orjson.dumps(section.to_dict(), option=orjson.OPT_INDENT_2) + b"\n"
            )
            return 0

        if args.command == "revert":
            if not LawLibrary(store).revert_override(args.section_id):
                log.warning("No override stored for %s", args.section_id)
            return 0

        if args.command == "export":
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_bytes(export_data(store))
            log.info("Backup written to %s", args.output)
            return 0

        if args.command == "import":
            if not args.input.exists():
                print(f"Error: file not found: {args.input}", file=sys.stderr)
                return 1
            if not import_data(store, args.input.read_bytes()):
                print(f"Error: invalid backup: {args.input}", file=sys.stderr)
                return 1
            return 0

        if args.command == "reset":
            reset_data(store)
            log.info("All notes and overrides removed")
            return 0

    return 2


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
