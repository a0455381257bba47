"""
Checkpoint database model.

Backs the SQL checkpoint store.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.checkpoint_enums import CheckpointStatus


class CheckpointRecord(Base):
    """
    Persisted checkpoint.

    `seq` is a surrogate key that preserves insertion order; the public
    checkpoint id lives in `checkpoint_id`.
    """
    __tablename__ = "checkpoints"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    checkpoint_id = Column(String(36), unique=True, nullable=False, index=True)

    unit_id = Column(String(64), nullable=False, index=True)
    status = Column(Enum(CheckpointStatus), nullable=False)

    # ISO-8601 string exactly as reported on the checkpoint
    timestamp = Column(String(32), nullable=False)
    history = Column(JSON, nullable=False, default=list)

    recorded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<CheckpointRecord(id='{self.checkpoint_id}', unit_id='{self.unit_id}', status='{self.status.value}')>"
