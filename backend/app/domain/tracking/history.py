"""
Checkpoint history lookup for a unit.
"""

from typing import List

from backend.app.domain.tracking.entities import Checkpoint
from backend.app.stores.base import CheckpointStore


class GetHistory:

    def __init__(self, checkpoint_store: CheckpointStore):
        self.checkpoint_store = checkpoint_store

    async def execute(self, unit_id: str) -> List[Checkpoint]:
        """Checkpoints for `unit_id` in the order they were recorded; empty if none."""
        if not unit_id:
            return []
        return await self.checkpoint_store.find_by_unit_id(unit_id)
