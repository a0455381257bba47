"""
Tracking dependencies for FastAPI.

Store handles are built once per application and kept on `app.state`;
routes receive them (and the operations built on them) through these
dependencies rather than through module-level singletons.
"""

from dataclasses import dataclass

from fastapi import Request

from backend.app.core.config import Settings
from backend.app.core.locking import KeyedLock
from backend.app.domain.tracking.history import GetHistory
from backend.app.domain.tracking.record_checkpoint import RecordCheckpoint
from backend.app.stores.base import CheckpointStore, UnitStore
from backend.app.stores.memory import InMemoryCheckpointStore, InMemoryUnitStore


@dataclass
class TrackingStores:
    """Store handles shared by every request of one application."""
    checkpoints: CheckpointStore
    units: UnitStore
    unit_locks: KeyedLock


def build_stores(settings: Settings, session_factory=None) -> TrackingStores:
    """
    Build the store pair for the configured storage backend.

    Args:
        settings: Application settings
        session_factory: async_sessionmaker for the database backend

    Raises:
        ValueError: Unknown storage backend or missing session factory
    """
    backend = settings.storage_backend.lower()
    if backend == "memory":
        return TrackingStores(InMemoryCheckpointStore(), InMemoryUnitStore(), KeyedLock())
    if backend == "database":
        if session_factory is None:
            raise ValueError("database storage backend requires a session factory")
        from backend.app.stores.sql import SqlCheckpointStore, SqlUnitStore
        return TrackingStores(
            SqlCheckpointStore(session_factory),
            SqlUnitStore(session_factory),
            KeyedLock()
        )
    raise ValueError(f"Unknown storage backend '{settings.storage_backend}'")


def get_stores(request: Request) -> TrackingStores:
    return request.app.state.stores


def get_record_checkpoint(request: Request) -> RecordCheckpoint:
    stores = get_stores(request)
    return RecordCheckpoint(stores.checkpoints, stores.units, stores.unit_locks)


def get_history(request: Request) -> GetHistory:
    return GetHistory(get_stores(request).checkpoints)
