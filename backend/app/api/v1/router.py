"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from backend.app.api.v1.endpoints import checkpoints, units

router = APIRouter()

# Checkpoint reporting and history
router.include_router(checkpoints.router)

# Unit projections
router.include_router(units.router)
