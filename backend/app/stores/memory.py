"""
In-memory stores.

Plain dicts scoped to the process lifetime. Each save replaces a single
entry, so a write is either fully visible or not at all. Units are copied
on the way in and out so callers never share state with the store.
"""

from typing import Dict, List, Optional

from backend.app.domain.tracking.entities import Checkpoint, Unit
from backend.app.stores.base import CheckpointStore, UnitStore


class InMemoryCheckpointStore(CheckpointStore):

    def __init__(self):
        # dicts keep insertion order; overwriting a key keeps its position
        self._checkpoints: Dict[str, Checkpoint] = {}

    async def save(self, checkpoint: Checkpoint) -> None:
        self._checkpoints[checkpoint.id] = checkpoint

    async def find_by_id(self, checkpoint_id: str) -> Optional[Checkpoint]:
        return self._checkpoints.get(checkpoint_id)

    async def find_by_unit_id(self, unit_id: str) -> List[Checkpoint]:
        if not unit_id:
            return []
        return [c for c in self._checkpoints.values() if c.unit_id == unit_id]

    def __len__(self) -> int:
        return len(self._checkpoints)


class InMemoryUnitStore(UnitStore):

    def __init__(self):
        self._units: Dict[str, Unit] = {}

    async def save(self, unit: Unit) -> None:
        self._units[unit.id] = unit.model_copy(deep=True)

    async def find_by_id(self, unit_id: str) -> Optional[Unit]:
        unit = self._units.get(unit_id)
        return unit.model_copy(deep=True) if unit else None

    async def find_all(self) -> List[Unit]:
        return [unit.model_copy(deep=True) for unit in self._units.values()]

    async def find_by_status(self, status: str) -> List[Unit]:
        if not status:
            return []
        return [
            unit.model_copy(deep=True)
            for unit in self._units.values()
            if unit.status == status
        ]

    def __len__(self) -> int:
        return len(self._units)
