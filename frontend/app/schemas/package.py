"""
Package Pydantic schemas.

Defines the read-only package snapshot returned by the backend and the
request bodies the frontend sends for package mutations. The backend speaks
camelCase; fields are exposed in snake_case.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime, date, timezone
from typing import Optional, List
from frontend.app.models.package_enums import PackageStatus, ShippingType, PackageSource


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so mixed payloads stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CamelModel(BaseModel):
    """Base schema for camelCase wire payloads."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class TrackingEvent(CamelModel):
    """A single status-change event in a package's history."""
    timestamp: datetime
    status: str
    location: Optional[str] = None
    details: Optional[str] = None


class Package(CamelModel):
    """
    Read-only package snapshot.

    The backend owns the lifecycle; the frontend never mutates a snapshot,
    it re-fetches after every action.
    """
    id: str
    status: PackageStatus
    shipping_type: ShippingType
    driver_id: Optional[str] = None
    updated_at: datetime
    created_at: Optional[datetime] = None
    history: List[TrackingEvent] = Field(default_factory=list)

    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    recipient_address: Optional[str] = None
    recipient_commune: Optional[str] = None
    recipient_city: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    notes: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    creator_id: Optional[str] = None
    source: Optional[PackageSource] = None
    billed: bool = False
    delivery_receiver_name: Optional[str] = None
    delivery_receiver_id: Optional[str] = None

    @field_validator("driver_id", "creator_id", mode="before")
    @classmethod
    def blank_id_is_none(cls, value):
        if value == "":
            return None
        return value

    @field_validator("history")
    @classmethod
    def order_history(cls, events: List[TrackingEvent]) -> List[TrackingEvent]:
        # Backend sends newest first; keep oldest first.
        return sorted(events, key=lambda event: as_utc(event.timestamp))

    @property
    def has_driver(self) -> bool:
        return self.driver_id is not None

    @property
    def latest_event(self) -> Optional[TrackingEvent]:
        return self.history[-1] if self.history else None

    @property
    def history_consistent(self) -> bool:
        """True when the latest history entry matches the current status."""
        latest = self.latest_event
        if latest is None:
            return True
        return latest.status == self.status.value


class PackageListResponse(BaseModel):
    """Schema for a page of packages."""
    packages: List[Package]
    total: int


class PackageUpdate(CamelModel):
    """Schema for editing a pending package."""
    recipient_name: Optional[str] = None
    recipient_phone: Optional[str] = None
    recipient_address: Optional[str] = None
    recipient_commune: Optional[str] = None
    recipient_city: Optional[str] = None
    notes: Optional[str] = None
    origin: Optional[str] = None
    status: Optional[PackageStatus] = None
    shipping_type: Optional[ShippingType] = None
    estimated_delivery: Optional[date] = None


class DriverAssignment(CamelModel):
    """Body for assigning a driver to one package."""
    driver_id: Optional[str]
    new_delivery_date: date


class BatchDriverAssignment(CamelModel):
    """Body for assigning a driver to several packages at once."""
    package_ids: List[str] = Field(..., min_length=1)
    driver_id: str
    new_delivery_date: date


class DeliveryConfirmation(CamelModel):
    """Proof of hand-over, used for deliveries and returns."""
    receiver_name: str = Field(..., min_length=1)
    receiver_id: str = Field(..., min_length=1)
    photos_base64: List[str] = Field(default_factory=list)


class ProblemReport(CamelModel):
    """Body for reporting a delivery problem."""
    reason: str = Field(..., min_length=1)
    photos_base64: List[str] = Field(default_factory=list)
