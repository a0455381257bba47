"""
Checkpoint Tracking API Endpoints.

Clients report status checkpoints for a unit and read back its history.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, Path, status
from backend.app.core.dependencies import TrackingStores, get_history, get_record_checkpoint, get_stores
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.domain.tracking.history import GetHistory
from backend.app.domain.tracking.record_checkpoint import RecordCheckpoint
from backend.app.schemas.checkpoint import CheckpointCreate, CheckpointResponse, UUID_PATTERN

router = APIRouter(tags=["Checkpoints"])


@router.post("/checkpoint", response_model=CheckpointResponse, status_code=status.HTTP_201_CREATED)
async def create_checkpoint(
    checkpoint_data: CheckpointCreate,
    record_checkpoint: RecordCheckpoint = Depends(get_record_checkpoint)
):
    """
    Record a status checkpoint for a unit.

    Validates:
    - Status is one of the known statuses (400 otherwise)
    - Unit does not already hold this status (409 otherwise)
    """
    checkpoint = await record_checkpoint.execute(
        checkpoint_data.unit_id,
        checkpoint_data.status,
        checkpoint_data.timestamp
    )
    return CheckpointResponse.model_validate(checkpoint)


@router.get("/history", response_model=List[CheckpointResponse])
async def get_unit_history(
    unit_id: str = Query(..., alias="unitId", pattern=UUID_PATTERN, description="Unit UUID"),
    get_history_op: GetHistory = Depends(get_history)
):
    """
    List every checkpoint recorded for a unit, oldest first.

    Unknown units return an empty list.
    """
    checkpoints = await get_history_op.execute(unit_id)
    return [CheckpointResponse.model_validate(c) for c in checkpoints]


@router.get("/checkpoints/{checkpoint_id}", response_model=CheckpointResponse)
async def get_checkpoint(
    checkpoint_id: str = Path(..., description="Checkpoint ID"),
    stores: TrackingStores = Depends(get_stores)
):
    """Get a single checkpoint by its id."""
    checkpoint = await stores.checkpoints.find_by_id(checkpoint_id)
    if checkpoint is None:
        raise ResourceNotFoundError("Checkpoint", checkpoint_id)
    return CheckpointResponse.model_validate(checkpoint)
