"""
Checkpoint Pydantic schemas.

Defines request and response models for checkpoint tracking. Wire names
are camelCase (`unitId`).
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List
from backend.app.models.checkpoint_enums import CheckpointStatus

UUID_PATTERN = r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"


class CheckpointCreate(BaseModel):
    """Schema for reporting a new checkpoint."""
    model_config = ConfigDict(populate_by_name=True)

    unit_id: str = Field(..., alias="unitId", pattern=UUID_PATTERN, description="Tracked unit UUID")
    # Checked against the status set by the use case so the error lists valid values
    status: str = Field(..., min_length=1, description="Reported status")
    timestamp: datetime = Field(..., description="When the unit reached the status (ISO-8601)")


class CheckpointHistoryItemResponse(BaseModel):
    """Schema for a single unit status change."""
    status: CheckpointStatus
    date: str

    model_config = ConfigDict(from_attributes=True)


class CheckpointResponse(BaseModel):
    """Schema for checkpoint response."""
    id: str
    unit_id: str = Field(..., serialization_alias="unitId")
    status: CheckpointStatus
    timestamp: str
    history: List[CheckpointHistoryItemResponse]

    model_config = ConfigDict(from_attributes=True)


class UnitResponse(BaseModel):
    """Schema for unit projection response."""
    id: str
    status: CheckpointStatus
    checkpoints: List[CheckpointHistoryItemResponse]

    model_config = ConfigDict(from_attributes=True)
