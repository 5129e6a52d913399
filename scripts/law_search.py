#!/usr/bin/env python3
"""Search sections by number, body or category text.

Query matching ignores case, whitespace and digit script, so "๑๑๒" and
"112" find the same sections.

Usage:
    python3 scripts/law_search.py --query "ทุจริต"
    python3 scripts/law_search.py --query 112 --collection crim
    python3 scripts/law_search.py --db data/lawmate.duckdb --mode flagged
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import orjson

from lawmate.library import LawLibrary
from lawmate.search import ViewMode, filter_sections, find_highlight_spans
from lawmate.store import open_store

log = logging.getLogger("law_search")

_SNIPPET_CHARS = 60


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search statute sections.")
    parser.add_argument("--query", "-q", default="", help="Search text")
    parser.add_argument(
        "--collection", default=None, help="Restrict to one collection id",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in ViewMode],
        default=ViewMode.SEARCH.value,
        help="View mode (default: search)",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Path to the user-data DuckDB store (needed for notes/flagged modes).",
    )
    parser.add_argument("--limit", type=int, default=50, help="Max results")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def snippet(body: str, query: str) -> str:
    """Text around the first query hit, or the start of the body."""
    spans = find_highlight_spans(body, query)
    if not spans:
        return body[:_SNIPPET_CHARS * 2]
    start, end = spans[0]
    lo = max(0, start - _SNIPPET_CHARS)
    hi = min(len(body), end + _SNIPPET_CHARS)
    return body[lo:hi]


def run(args: argparse.Namespace) -> int:
    store = open_store(args.db)
    try:
        library = LawLibrary(store)
        results = filter_sections(
            library.sections(),
            library.notes(),
            query=args.query,
            mode=ViewMode(args.mode),
            collection_id=args.collection,
        )
        log.debug("%d matches for %r", len(results), args.query)
        truncated = len(results) > args.limit
        dump_json({
            "query": args.query,
            "mode": args.mode,
            "total_matches": len(results),
            "truncated": truncated,
            "matches": [
                {
                    "id": s.id,
                    "number": s.number,
                    "category": s.category,
                    "snippet": snippet(s.body, args.query),
                }
                for s in results[:args.limit]
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
