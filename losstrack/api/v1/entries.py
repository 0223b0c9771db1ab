"""
Loss entry endpoints.
"""
from typing import Optional
from fastapi import APIRouter, Depends, status

from losstrack.api.deps import get_entry_service
from losstrack.entries import EntryService
from losstrack.schemas import EntryCreate, EntryRecord

router = APIRouter(prefix="/entries", tags=["Entries"])


@router.post("", response_model=EntryRecord, status_code=status.HTTP_201_CREATED)
def create_entry(data: EntryCreate, entries: EntryService = Depends(get_entry_service)):
    """
    Record a loss entry.

    - **product_code**: Code of an active product (zero-padded to 13 digits)
    - **reason_id**: Store id of the loss reason
    - **quantity**: Lost quantity, zero or more
    """
    return entries.record_entry(data.product_code, data.reason_id, data.quantity, data.unit_type)


@router.get("/pending", response_model=list[EntryRecord])
def pending_entries(reason_id: Optional[int] = None, entries: EntryService = Depends(get_entry_service)):
    """Entries not yet included in an export file."""
    return entries.get_pending_entries(reason_id)
