"""
Store interfaces for checkpoints and units.

Operations depend on these interfaces only; the application wires in the
in-memory or SQL implementation at startup.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from backend.app.domain.tracking.entities import Checkpoint, Unit


class CheckpointStore(ABC):
    """Checkpoint persistence keyed by checkpoint id."""

    @abstractmethod
    async def save(self, checkpoint: Checkpoint) -> None:
        """Insert or overwrite by id (last write wins)."""

    @abstractmethod
    async def find_by_id(self, checkpoint_id: str) -> Optional[Checkpoint]:
        ...

    @abstractmethod
    async def find_by_unit_id(self, unit_id: str) -> List[Checkpoint]:
        """All checkpoints for a unit, in insertion order."""


class UnitStore(ABC):
    """Unit projection persistence keyed by unit id."""

    @abstractmethod
    async def save(self, unit: Unit) -> None:
        """Insert or overwrite by id."""

    @abstractmethod
    async def find_by_id(self, unit_id: str) -> Optional[Unit]:
        ...

    @abstractmethod
    async def find_all(self) -> List[Unit]:
        ...

    @abstractmethod
    async def find_by_status(self, status: str) -> List[Unit]:
        """Units currently in `status`. Unknown or empty status matches nothing."""
