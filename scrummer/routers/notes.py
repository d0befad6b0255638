"""
Ceremony notes endpoints.

Each ceremony keeps the answers from its copilot form; saving one ceremony
leaves the others as they were.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from scrummer.core.dependencies import get_notes_store
from scrummer.models.schemas import Ceremony, CeremonyNotes
from scrummer.services.notes_store import NotesStore

router = APIRouter(prefix="/notes", tags=["notes"])


@router.get("", response_model=list[CeremonyNotes])
async def list_notes(store: NotesStore = Depends(get_notes_store)) -> list[CeremonyNotes]:
    return store.all()


@router.get("/{ceremony}", response_model=CeremonyNotes)
async def get_notes(ceremony: Ceremony, store: NotesStore = Depends(get_notes_store)) -> CeremonyNotes:
    return store.get(ceremony)


@router.put("/{ceremony}", response_model=CeremonyNotes)
async def save_notes(
    ceremony: Ceremony,
    values: dict[str, Any] = Body(...),
    store: NotesStore = Depends(get_notes_store),
) -> CeremonyNotes:
    """Replace the notes for a ceremony. Unknown fields are ignored."""
    return store.save(ceremony, values)


@router.delete("/{ceremony}", status_code=204)
async def clear_notes(ceremony: Ceremony, store: NotesStore = Depends(get_notes_store)) -> None:
    store.clear(ceremony)
