"""
SQLAlchemy-backed stores.

Each save runs in its own session and commits once, so a write is either
fully persisted or rolled back.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from backend.app.domain.tracking.entities import Checkpoint, Unit
from backend.app.models.checkpoint import CheckpointRecord
from backend.app.models.checkpoint_enums import CheckpointStatus, is_valid_status
from backend.app.models.unit import UnitRecord
from backend.app.stores.base import CheckpointStore, UnitStore


def _to_checkpoint(record: CheckpointRecord) -> Checkpoint:
    return Checkpoint(
        id=record.checkpoint_id,
        unit_id=record.unit_id,
        status=record.status,
        timestamp=record.timestamp,
        history=record.history or [],
    )


def _to_unit(record: UnitRecord) -> Unit:
    return Unit(
        id=record.id,
        status=record.status,
        checkpoints=record.checkpoints or [],
    )


class SqlCheckpointStore(CheckpointStore):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save(self, checkpoint: Checkpoint) -> None:
        history = [item.model_dump(mode="json") for item in checkpoint.history]
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    select(CheckpointRecord).where(CheckpointRecord.checkpoint_id == checkpoint.id)
                )
                record = result.scalar_one_or_none()
                if record is None:
                    session.add(CheckpointRecord(
                        checkpoint_id=checkpoint.id,
                        unit_id=checkpoint.unit_id,
                        status=checkpoint.status,
                        timestamp=checkpoint.timestamp,
                        history=history,
                    ))
                else:
                    # Overwrite in place; `seq` keeps the original position
                    record.unit_id = checkpoint.unit_id
                    record.status = checkpoint.status
                    record.timestamp = checkpoint.timestamp
                    record.history = history

    async def find_by_id(self, checkpoint_id: str) -> Optional[Checkpoint]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CheckpointRecord).where(CheckpointRecord.checkpoint_id == checkpoint_id)
            )
            record = result.scalar_one_or_none()
            return _to_checkpoint(record) if record else None

    async def find_by_unit_id(self, unit_id: str) -> List[Checkpoint]:
        if not unit_id:
            return []
        async with self._session_factory() as session:
            result = await session.execute(
                select(CheckpointRecord)
                .where(CheckpointRecord.unit_id == unit_id)
                .order_by(CheckpointRecord.seq)
            )
            return [_to_checkpoint(r) for r in result.scalars().all()]


class SqlUnitStore(UnitStore):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save(self, unit: Unit) -> None:
        checkpoints = [item.model_dump(mode="json") for item in unit.checkpoints]
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.get(UnitRecord, unit.id)
                if record is None:
                    session.add(UnitRecord(id=unit.id, status=unit.status, checkpoints=checkpoints))
                else:
                    record.status = unit.status
                    record.checkpoints = checkpoints

    async def find_by_id(self, unit_id: str) -> Optional[Unit]:
        async with self._session_factory() as session:
            record = await session.get(UnitRecord, unit_id)
            return _to_unit(record) if record else None

    async def find_all(self) -> List[Unit]:
        async with self._session_factory() as session:
            result = await session.execute(select(UnitRecord))
            return [_to_unit(r) for r in result.scalars().all()]

    async def find_by_status(self, status: str) -> List[Unit]:
        if not is_valid_status(status):
            return []
        async with self._session_factory() as session:
            result = await session.execute(
                select(UnitRecord).where(UnitRecord.status == CheckpointStatus(status))
            )
            return [_to_unit(r) for r in result.scalars().all()]
