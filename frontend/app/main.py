"""
Frontend application entry point.

Wires the backend client to the views and owns their polling lifetime.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

import httpx

from frontend.app.core.config import settings
from frontend.app.core.observability import configure_logging
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters
from frontend.app.services.api_client import DeliveryApiClient
from frontend.app.services.base_view import BaseView
from frontend.app.services.driver_view import DriverWorkloadView
from frontend.app.services.package_view import PackageListView
from frontend.app.services.pickup_view import PickupDayView

logger = logging.getLogger(__name__)


class FrontendApp:
    """The backend client plus every open view."""

    def __init__(self, api: DeliveryApiClient, auto_refresh: bool = True):
        self.api = api
        self.auto_refresh = auto_refresh
        self.packages = PackageListView(api)
        self.returns = PackageListView(
            api,
            refresh_seconds=settings.returns_refresh_seconds,
            base_filters=PackageFilters(status=PackageStatus.RETURN_PENDING),
        )
        self.pickups = PickupDayView(api)
        self.driver_views: Dict[str, DriverWorkloadView] = {}

    @property
    def views(self) -> List[BaseView]:
        return [self.packages, self.returns, self.pickups, *self.driver_views.values()]

    async def open_view(self, view: BaseView) -> BaseView:
        await view.refresh()
        if self.auto_refresh:
            view.start_auto_refresh()
        return view

    async def open_driver_view(self, driver_id: str) -> DriverWorkloadView:
        """Load (once) and return the workload view of one driver."""
        view = self.driver_views.get(driver_id)
        if view is None:
            view = self.driver_views[driver_id] = DriverWorkloadView(self.api, driver_id)
            await self.open_view(view)
        return view

    async def close(self) -> None:
        for view in self.views:
            await view.stop_auto_refresh()


def build_app(api: DeliveryApiClient, auto_refresh: bool = True) -> FrontendApp:
    return FrontendApp(api, auto_refresh=auto_refresh)


@asynccontextmanager
async def lifespan(
    auto_refresh: bool = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[FrontendApp]:
    """
    Application startup/shutdown.

    1. Configures logging and opens the backend client.
    2. Loads every view once and starts the timers of the polled ones.
    3. On exit stops the timers and closes the client.
    """
    configure_logging(settings.log_level)
    logger.info("Starting %s against %s", settings.app_name, settings.api_base_url)

    async with DeliveryApiClient(transport=transport) as api:
        app = build_app(api, auto_refresh=auto_refresh)
        for view in app.views:
            await app.open_view(view)
        try:
            yield app
        finally:
            await app.close()
            logger.info("Stopped %s", settings.app_name)
