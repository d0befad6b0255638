"""
Sprint setup endpoints.

Loads, replaces and partially updates the stored setup record.
"""

from fastapi import APIRouter, Depends

from scrummer.core.dependencies import get_setup_store
from scrummer.models.schemas import SetupRecord, SetupUpdate
from scrummer.services.setup_store import SetupStore

router = APIRouter(prefix="/setup", tags=["setup"])


@router.get("", response_model=SetupRecord)
async def get_setup(store: SetupStore = Depends(get_setup_store)) -> SetupRecord:
    return store.load()


@router.put("", response_model=SetupRecord)
async def replace_setup(setup: SetupRecord, store: SetupStore = Depends(get_setup_store)) -> SetupRecord:
    """Replace the stored setup. Missing fields become 0."""
    return store.save(setup)


@router.patch("", response_model=SetupRecord)
async def update_setup(changes: SetupUpdate, store: SetupStore = Depends(get_setup_store)) -> SetupRecord:
    """Merge the supplied fields into the stored setup."""
    return store.update(changes)
