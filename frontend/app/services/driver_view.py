"""
Driver workload view state.

One driver's packages for the day, polled on a timer. Tracks when the last
open package gets processed so the screen can offer to close the day.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from frontend.app.core.config import settings
from frontend.app.core.exceptions import ActionNotAllowedError
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination
from frontend.app.schemas.package import Package
from frontend.app.services.api_client import DeliveryApiClient
from frontend.app.services.base_view import BaseView
from frontend.app.services.driver_workload import DriverWorkload, EndOfDayWatcher, is_open, split_workload

logger = logging.getLogger(__name__)


class DriverWorkloadView(BaseView):
    """
    View state for a driver's dashboard.

    Usage:
        view = DriverWorkloadView(api, driver_id="drv-1")
        await view.refresh()
        if view.day_completed:
            ...
    """

    name = "driver-workload"

    def __init__(
        self,
        api: DeliveryApiClient,
        driver_id: str,
        refresh_seconds: Optional[float] = None,
        today: Optional[date] = None,
    ):
        super().__init__(refresh_seconds or settings.driver_refresh_seconds)
        self.api = api
        self.driver_id = driver_id
        self.today = today

        self.packages: List[Package] = []
        self.workload = DriverWorkload()
        self.day_completed = False
        self._watcher = EndOfDayWatcher()

    async def fetch(self) -> List[Package]:
        packages, _ = await self.api.list_packages(
            PackageFilters(driver_id=self.driver_id), Pagination(limit=0)
        )
        return packages

    def apply(self, packages: List[Package]) -> None:
        self.packages = packages
        self.workload = split_workload(packages, today=self.today)
        if self._watcher.observe(packages):
            self.day_completed = True
            logger.info("Driver %s processed all %d packages", self.driver_id, len(packages))

    def acknowledge_day_completed(self) -> None:
        self.day_completed = False

    def _ensure_open(self, action: str, package: Package) -> None:
        if package.driver_id != self.driver_id or not is_open(package):
            raise ActionNotAllowedError(action=action, package_id=package.id, status=package.status.value)

    async def confirm_delivery(self, package: Package, confirmation: Dict[str, Any]) -> Package:
        """
        Record the hand-over of one of the driver's open packages.

        Args:
            package: Current snapshot of the package
            confirmation: receiver_name, receiver_id and optional photos_base64
        """
        self._ensure_open("DELIVER", package)
        return await self._run_action(
            f"Deliver {package.id}",
            lambda: self.api.update_package_status(package.id, PackageStatus.DELIVERED, confirmation),
        )

    async def report_problem(self, package: Package, report: Dict[str, Any]) -> Package:
        self._ensure_open("REPORT_PROBLEM", package)
        return await self._run_action(
            f"Report problem on {package.id}",
            lambda: self.api.update_package_status(package.id, PackageStatus.PROBLEM, report),
        )
