"""
Pickup planning view state.

Loads one day of pickup runs together with the pending packages and the
user directory, and exposes the per-driver summaries. Fetched on demand
and whenever the day changes.
"""

from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from frontend.app.models.enums import UserRole
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination
from frontend.app.schemas.package import Package
from frontend.app.schemas.pickup import PickupRun
from frontend.app.schemas.user import UserResponse
from frontend.app.services.api_client import DeliveryApiClient
from frontend.app.services.base_view import BaseView
from frontend.app.services.pickup_summary import (
    DriverPickups,
    clients_available_for_assignment,
    group_by_driver,
    pending_packages_by_client,
    total_packages_picked_up,
)


class PickupDayView(BaseView):
    """View state for the pickup planning screen."""

    name = "pickup-day"

    def __init__(self, api: DeliveryApiClient, day: Optional[date] = None):
        super().__init__()
        self.api = api
        self.day = day or datetime.now(timezone.utc).date()

        self.runs: List[PickupRun] = []
        self.pending_packages: List[Package] = []
        self.users: List[UserResponse] = []

    async def fetch(self) -> Tuple[List[PickupRun], List[Package], List[UserResponse]]:
        runs = await self.api.get_pickup_runs(self.day, self.day)
        packages, _ = await self.api.list_packages(
            PackageFilters(status=PackageStatus.PENDING), Pagination(limit=0)
        )
        users = await self.api.get_users()
        return runs, packages, users

    def apply(self, data: Tuple[List[PickupRun], List[Package], List[UserResponse]]) -> None:
        self.runs, self.pending_packages, self.users = data

    async def set_day(self, day: date) -> bool:
        self.day = day
        return await self.refresh()

    @property
    def by_driver(self) -> Dict[str, DriverPickups]:
        return group_by_driver(self.runs)

    @property
    def packages_picked_up(self) -> int:
        return total_packages_picked_up(self.runs)

    @property
    def pending_by_client(self) -> Dict[str, int]:
        return pending_packages_by_client(self.pending_packages)

    @property
    def drivers(self) -> List[UserResponse]:
        return [u for u in self.users if u.role == UserRole.DRIVER and u.is_approved]

    def available_clients(self, search: str = "") -> List[UserResponse]:
        return clients_available_for_assignment(self.users, self.runs, search)
