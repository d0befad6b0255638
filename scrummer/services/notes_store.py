"""
Per-ceremony notes from the ceremony copilot.

All notes live in one JSON object keyed by ceremony. Each ceremony accepts a
fixed set of form fields; anything else is dropped on save.
"""

import logging
from typing import Any

from scrummer.models.schemas import Ceremony, CeremonyNotes
from scrummer.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

NOTES_KEY = "scrummer-copilot-v1"

# Field name -> camelCase name used by the browser form
NOTE_FIELDS: dict[Ceremony, dict[str, str]] = {
    Ceremony.PLANNING: {"final_commit": "finalCommit", "risk_acceptance": "riskAcceptance"},
    Ceremony.DAILY: {"blocker_owner": "blockerOwner", "wip_move": "wipMove"},
    Ceremony.REFINE: {"ready_count": "readyCount"},
    Ceremony.REVIEW: {"shipped": "shipped"},
    Ceremony.RETRO: {"experiment": "experiment"},
}


def _clean(ceremony: Ceremony, values: dict[str, Any]) -> dict[str, str]:
    notes = {}
    for name, camel in NOTE_FIELDS[ceremony].items():
        value = values.get(name, values.get(camel))
        if value is not None:
            notes[name] = str(value)
    return notes


class NotesStore:
    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def _load_all(self) -> dict[str, Any]:
        raw = self.storage.get(NOTES_KEY)
        return raw if isinstance(raw, dict) else {}

    def get(self, ceremony: Ceremony) -> CeremonyNotes:
        stored = self._load_all().get(ceremony.value)
        notes = _clean(ceremony, stored) if isinstance(stored, dict) else {}
        return CeremonyNotes(ceremony=ceremony, fields=list(NOTE_FIELDS[ceremony]), notes=notes)

    def all(self) -> list[CeremonyNotes]:
        return [self.get(ceremony) for ceremony in Ceremony]

    def save(self, ceremony: Ceremony, values: dict[str, Any]) -> CeremonyNotes:
        """Replace the notes for one ceremony. Other ceremonies are untouched."""
        store = self._load_all()
        store[ceremony.value] = _clean(ceremony, values)
        if not self.storage.set(NOTES_KEY, store):
            logger.warning("Notes for %s were not persisted", ceremony.value)
        return CeremonyNotes(ceremony=ceremony, fields=list(NOTE_FIELDS[ceremony]), notes=store[ceremony.value])

    def clear(self, ceremony: Ceremony) -> None:
        store = self._load_all()
        if store.pop(ceremony.value, None) is not None:
            self.storage.set(NOTES_KEY, store)
