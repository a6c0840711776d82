"""
Pickup run schemas.

A pickup run is one driver's batch of client visits for one date and shift.
"""

from pydantic import Field
from datetime import datetime, date
from typing import List, Optional
from frontend.app.models.pickup_enums import PickupStatus, PickupShift
from frontend.app.schemas.package import CamelModel


class PickupAssignment(CamelModel):
    """Schema for a single client visit within a run."""
    id: str
    run_id: str
    client_id: str
    client_name: str
    client_address: Optional[str] = None
    client_phone: Optional[str] = None
    status: PickupStatus
    cost: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    notes: Optional[str] = None
    packages_to_pickup: int = 0
    packages_picked_up: Optional[int] = None


class PickupRun(CamelModel):
    """Schema for a pickup run."""
    id: str
    driver_id: str
    driver_name: str
    run_date: date = Field(..., alias="date")
    shift: PickupShift
    assignments: List[PickupAssignment] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    informed: bool = False
    informed_at: Optional[datetime] = None
