"""Persistence for the sprint setup blob."""

import logging

from pydantic import ValidationError

from scrummer.models.schemas import SetupRecord, SetupUpdate
from scrummer.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

SETUP_KEY = "scrummer-setup-v1"


class SetupStore:
    def __init__(self, storage: KeyValueStore):
        self.storage = storage

    def load(self) -> SetupRecord:
        """Load the stored setup; missing or corrupt data yields an all-zero record."""
        raw = self.storage.get(SETUP_KEY)
        if not isinstance(raw, dict):
            return SetupRecord()
        try:
            return SetupRecord.model_validate(raw)
        except ValidationError:
            logger.warning("Stored setup is malformed, using defaults")
            return SetupRecord()

    def save(self, setup: SetupRecord) -> SetupRecord:
        self.storage.set(SETUP_KEY, setup.model_dump())
        return setup

    def update(self, changes: SetupUpdate) -> SetupRecord:
        """Merge only the supplied fields into the stored setup."""
        merged = self.load().model_dump()
        merged.update(changes.model_dump(exclude_unset=True))
        return self.save(SetupRecord.model_validate(merged))
