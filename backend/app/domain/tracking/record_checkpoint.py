"""
Record Checkpoint (Domain Logic).

Accepts a status report for a unit, appends it to the checkpoint log and
moves the unit's current-status projection forward.
"""

import logging
from datetime import datetime
from typing import Optional

from backend.app.core.exceptions import DuplicateRequestError, InvalidStatusError
from backend.app.core.locking import KeyedLock
from backend.app.domain.tracking.entities import Checkpoint, Unit
from backend.app.models.checkpoint_enums import CheckpointStatus, VALID_STATUSES, is_valid_status
from backend.app.stores.base import CheckpointStore, UnitStore

logger = logging.getLogger("tracking")


class RecordCheckpoint:

    def __init__(
        self,
        checkpoint_store: CheckpointStore,
        unit_store: UnitStore,
        unit_locks: Optional[KeyedLock] = None
    ):
        self.checkpoint_store = checkpoint_store
        self.unit_store = unit_store
        self.unit_locks = unit_locks or KeyedLock()

    async def execute(self, unit_id: str, status: str, timestamp: datetime) -> Checkpoint:
        """
        Record a checkpoint for a unit.

        Flow:
        1. Validate status against the closed set
        2. Idempotency check (unit already holds this status)
        3. Save checkpoint, then create or update the unit projection

        Steps 2 and 3 run under a per-unit lock so concurrent reports for
        the same unit cannot interleave between the check and the writes.

        Args:
            unit_id: Tracked unit identifier
            status: Reported status literal
            timestamp: Time the unit reached the status

        Returns:
            The newly created Checkpoint

        Raises:
            InvalidStatusError: status is not one of the known literals
            DuplicateRequestError: unit already has this status
        """
        # 1. Validation
        if not is_valid_status(status):
            logger.warning("Rejected checkpoint for unit %s: invalid status %r", unit_id, status)
            raise InvalidStatusError(status, VALID_STATUSES)
        new_status = CheckpointStatus(status)

        async with self.unit_locks.hold(unit_id):
            # 2. Idempotency Check
            unit = await self.unit_store.find_by_id(unit_id)
            if unit is not None and unit.status == new_status:
                logger.warning("Rejected checkpoint for unit %s: already %s", unit_id, new_status.value)
                raise DuplicateRequestError(unit_id, new_status.value)

            # 3. Commit
            checkpoint = Checkpoint.create(unit_id, new_status, timestamp)
            await self.checkpoint_store.save(checkpoint)

            if unit is None:
                unit = Unit(id=unit_id, status=new_status)
            else:
                unit.update_status(new_status)
            await self.unit_store.save(unit)

        logger.info(
            "Recorded checkpoint %s for unit %s: %s",
            checkpoint.id, unit_id, new_status.value
        )
        return checkpoint
