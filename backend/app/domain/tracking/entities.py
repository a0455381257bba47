"""
Tracking Domain Entities.

A Checkpoint states that a unit reached a status at a point in time and is
never changed once built. A Unit is the current-status projection of a
tracked parcel plus the list of status changes applied after its creation.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.models.checkpoint_enums import CheckpointStatus


def format_iso_timestamp(value: datetime) -> str:
    """
    Serialize a datetime as ISO-8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC already.
    Example: 2025-10-08T12:34:56.789Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_wall_clock(value: Optional[datetime] = None) -> str:
    """
    Human-readable local time, e.g. 'Wed Oct 08 2025 12:34:56 GMT+0000 (UTC)'.

    The trailing zone is the platform abbreviation from `%Z` (e.g. 'CEST'),
    not a long zone name.
    """
    value = (value or datetime.now()).astimezone()
    return value.strftime("%a %b %d %Y %H:%M:%S GMT%z (%Z)")


class CheckpointHistoryItem(BaseModel):
    """A single status change recorded on a unit."""
    model_config = ConfigDict(frozen=True)

    status: CheckpointStatus
    date: str


class Checkpoint(BaseModel):
    """Immutable record of 'unit X reached status S at time T'."""
    model_config = ConfigDict(frozen=True)

    id: str
    unit_id: str
    status: CheckpointStatus
    timestamp: str
    history: List[CheckpointHistoryItem] = Field(default_factory=list)

    @classmethod
    def create(cls, unit_id: str, status: CheckpointStatus, timestamp: datetime) -> "Checkpoint":
        """Build a checkpoint with a fresh UUID-v4 id."""
        return cls(
            id=str(uuid.uuid4()),
            unit_id=unit_id,
            status=status,
            timestamp=format_iso_timestamp(timestamp),
            history=[],
        )


class Unit(BaseModel):
    """
    Current-status projection of a tracked unit.

    The creating status is not part of `checkpoints`; only later
    `update_status` calls append entries.
    """

    id: str
    status: CheckpointStatus
    checkpoints: List[CheckpointHistoryItem] = Field(default_factory=list)

    def update_status(self, new_status: CheckpointStatus) -> None:
        """Set the current status and append a wall-clock history entry."""
        self.status = new_status
        self.checkpoints.append(
            CheckpointHistoryItem(status=new_status, date=format_wall_clock())
        )

    def __repr__(self):
        return f"<Unit(id='{self.id}', status='{self.status.value}', changes={len(self.checkpoints)})>"
