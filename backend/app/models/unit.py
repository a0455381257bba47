"""
Unit database model.

Backs the SQL unit store. Status changes after creation are kept as a JSON
list of {status, date} entries.
"""

from sqlalchemy import Column, String, DateTime, Enum, JSON
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.checkpoint_enums import CheckpointStatus


class UnitRecord(Base):
    """Persisted current-status projection of a unit."""
    __tablename__ = "units"

    id = Column(String(64), primary_key=True)
    status = Column(Enum(CheckpointStatus), nullable=False, index=True)
    checkpoints = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UnitRecord(id='{self.id}', status='{self.status.value}')>"
