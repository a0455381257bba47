"""
Unit Projection API Endpoints.

Read-only views of each unit's current status and status-change list.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Path
from backend.app.core.dependencies import TrackingStores, get_stores
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.schemas.checkpoint import UnitResponse

router = APIRouter(prefix="/units", tags=["Units"])


@router.get("", response_model=List[UnitResponse])
async def list_units(
    status: Optional[str] = Query(None, description="Only units currently in this status"),
    stores: TrackingStores = Depends(get_stores)
):
    """
    List tracked units.

    With `status`, only units whose current status matches exactly.
    An unknown status matches nothing.
    """
    if status is None:
        units = await stores.units.find_all()
    else:
        units = await stores.units.find_by_status(status)
    return [UnitResponse.model_validate(u) for u in units]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: str = Path(..., description="Unit ID"),
    stores: TrackingStores = Depends(get_stores)
):
    """Get the current-status projection of a unit."""
    unit = await stores.units.find_by_id(unit_id)
    if unit is None:
        raise ResourceNotFoundError("Unit", unit_id)
    return UnitResponse.model_validate(unit)
