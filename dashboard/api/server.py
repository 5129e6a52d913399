"""FastAPI server for the law library.

Exposes the assembled sections (built-ins merged with user overrides),
search, notes, settings and backup as JSON endpoints.

Configuration (environment):
    LAWMATE_DB         path to the user-data DuckDB store
                       (default: <repo>/data/lawmate.duckdb)
    LAWMATE_DB_CREATE  "1" to create the store when it does not exist;
                       otherwise a missing store means an in-memory one

Usage:
    cd dashboard
    PYTHONPATH=../src uvicorn api.server:app --reload --port 8000
"""
from __future__ import annotations

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import orjson
from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, Response
from pydantic import BaseModel, Field

# Add src to path so we can import lawmate modules
_lawmate_src = Path(__file__).resolve().parents[2] / "src"
if str(_lawmate_src) not in sys.path:
    sys.path.insert(0, str(_lawmate_src))

from lawmate.backup import export_data, import_data  # noqa: E402
from lawmate.library import LawLibrary  # noqa: E402
from lawmate.references import resolve_reference  # noqa: E402
from lawmate.search import ViewMode, filter_sections  # noqa: E402
from lawmate.section_types import (  # noqa: E402
    Note,
    SectionInput,
    Settings,
    TextHighlight,
)
from lawmate.store import DuckDBStore, MemoryStore  # noqa: E402
from lawmate.toc import build_toc  # noqa: E402

# ---------------------------------------------------------------------------
# Globals
#
# DuckDB connections are NOT thread-safe. Run with a single uvicorn worker
# and keep endpoints async def so they execute on the event loop thread.
# ---------------------------------------------------------------------------
_default_db_path = Path(__file__).resolve().parents[2] / "data" / "lawmate.duckdb"
_db_path = Path(os.environ.get("LAWMATE_DB", str(_default_db_path)))
_db_create = os.environ.get("LAWMATE_DB_CREATE", "") == "1"

_store: DuckDBStore | MemoryStore | None = None
_library: LawLibrary | None = None


def _get_library() -> LawLibrary:
    """Get the library, raising 503 if not available."""
    if _library is None:
        raise HTTPException(status_code=503, detail="Library not initialised")
    return _library


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    global _store, _library  # noqa: PLW0603
    if _db_path.exists() or _db_create:
        _store = DuckDBStore(_db_path, create_if_missing=_db_create)
        print(f"[lawmate] User data store: {_db_path}")
    else:
        _store = MemoryStore()
        print(f"[lawmate] No store at {_db_path} -- user data kept in memory")
    _library = LawLibrary(_store)
    print(f"[lawmate] Built-in sections: {len(_library.builtins())}")
    yield
    _store.close()
    _store = None
    _library = None


app = FastAPI(
    title="Lawmate API",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------
class OverrideRequest(BaseModel):
    number: str = Field(min_length=1)
    body: str = Field(min_length=1)
    category: str = ""
    collection_id: str | None = None
    id: str | None = None


class HighlightModel(BaseModel):
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    color: str = "yellow"


class NoteRequest(BaseModel):
    text: str = ""
    is_highlighted: bool = False
    highlights: list[HighlightModel] = Field(default_factory=list)


class SettingsRequest(BaseModel):
    dark_mode: bool = False
    font_size: int = Field(default=2, ge=1, le=5)
    font_style: str = "modern"


# ---------------------------------------------------------------------------
# Routes: Health / collections
# ---------------------------------------------------------------------------
@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "library_loaded": _library is not None,
        "persistent": isinstance(_store, DuckDBStore),
    }


@app.get("/api/collections")
async def list_collections():
    library = _get_library()
    counts: dict[str, int] = {}
    for s in library.sections():
        if s.collection_id:
            counts[s.collection_id] = counts.get(s.collection_id, 0) + 1
    return {
        "collections": [
            {
                "id": c.id,
                "name": c.name,
                "abbreviation": c.abbreviation,
                "description": c.description,
                "source_url": c.source_url,
                "last_updated": c.last_updated,
                "section_count": counts.get(c.id, 0),
            }
            for c in library.collections
        ],
    }


# ---------------------------------------------------------------------------
# Routes: Sections
# ---------------------------------------------------------------------------
@app.get("/api/sections")
async def list_sections(
    collection: str | None = Query(None, description="Collection id scope"),
    mode: ViewMode = Query(ViewMode.ALL),
    q: str = Query("", max_length=500, description="Search text"),
    limit: int = Query(500, ge=1, le=5000),
):
    """Sections in display order, filtered by scope, view mode and query."""
    library = _get_library()
    results = filter_sections(
        library.sections(),
        library.notes(),
        query=q,
        mode=mode,
        collection_id=collection,
    )
    truncated = len(results) > limit
    return {
        "collection": collection,
        "mode": mode.value,
        "query": q,
        "total": len(results),
        "truncated": truncated,
        "sections": [s.to_dict() for s in results[:limit]],
    }


@app.get("/api/sections/{section_id}")
async def get_section(section_id: str):
    view = _get_library().section_view(section_id)
    if view is None:
        raise HTTPException(status_code=404, detail=f"Section not found: {section_id}")
    return view


@app.get("/api/resolve")
async def resolve_section(
    label: str = Query(..., min_length=1, description="Section number, either digit script"),
    collection: str | None = Query(None),
):
    """Deep-link lookup of a section by its number within a collection."""
    section = resolve_reference(
        label, _get_library().sections(), collection_id=collection,
    )
    if section is None:
        raise HTTPException(status_code=404, detail=f"No section numbered {label}")
    return section.to_dict()


@app.get("/api/toc")
async def table_of_contents(collection: str | None = Query(None)):
    sections = [
        s for s in _get_library().sections()
        if collection is None or s.collection_id == collection
    ]
    return {"collection": collection, "nodes": [n.to_dict() for n in build_toc(sections)]}


# ---------------------------------------------------------------------------
# Routes: Overrides
# ---------------------------------------------------------------------------
@app.put("/api/overrides")
async def save_override(request: OverrideRequest):
    try:
        section = _get_library().save_override(SectionInput(
            number=request.number,
            body=request.body,
            category=request.category,
            collection_id=request.collection_id,
            id=request.id,
        ))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return section.to_dict()


@app.delete("/api/overrides/{section_id}")
async def revert_override(section_id: str):
    library = _get_library()
    removed = library.revert_override(section_id)
    restored = library.get_section(section_id)
    return {
        "section_id": section_id,
        "removed": removed,
        "restored": restored.to_dict() if restored else None,
    }


# ---------------------------------------------------------------------------
# Routes: Notes / settings
# ---------------------------------------------------------------------------
@app.get("/api/notes")
async def list_notes():
    notes = _get_library().notes()
    return {"notes": {k: n.to_dict() for k, n in notes.items()}}


@app.put("/api/notes/{section_id}")
async def save_note(section_id: str, request: NoteRequest):
    """Upsert a note; a note with no text, flag or spans is deleted."""
    note = Note(
        section_id=section_id,
        text=request.text,
        is_highlighted=request.is_highlighted,
        highlights=tuple(
            TextHighlight.from_dict(h.model_dump()) for h in request.highlights
        ),
    )
    notes = _get_library().save_note(note)
    stored = notes.get(section_id)
    return {"section_id": section_id, "note": stored.to_dict() if stored else None}


@app.get("/api/settings")
async def get_settings():
    return _get_library().settings().to_dict()


@app.put("/api/settings")
async def save_settings(request: SettingsRequest):
    settings = Settings.from_dict(request.model_dump())
    _get_library().save_settings(settings)
    return settings.to_dict()


# ---------------------------------------------------------------------------
# Routes: Backup
# ---------------------------------------------------------------------------
@app.get("/api/export")
async def export_backup():
    return Response(
        content=export_data(_get_library().store),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="lawmate-backup.json"'},
    )


@app.post("/api/import")
async def import_backup(payload: Any = Body(...)):
    if not import_data(_get_library().store, orjson.dumps(payload)):
        raise HTTPException(status_code=400, detail="Invalid backup format")
    return {"status": "ok"}
