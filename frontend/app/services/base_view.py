"""
Shared view-state machinery.

A view holds a snapshot fetched from the backend. Only the most recently
issued fetch may replace it, and mutations run one at a time with the
view's auto-refresh paused.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from frontend.app.core.exceptions import ActionInProgressError, AppException
from frontend.app.services.auto_refresh import AutoRefresher

logger = logging.getLogger(__name__)


class BaseView:
    """
    Base class for view state.

    Subclasses implement fetch() to load data through the API and apply()
    to store it. Passing ``refresh_seconds`` gives the view a timer.
    """

    name = "view"

    def __init__(self, refresh_seconds: Optional[float] = None):
        self.is_loading = False
        self.is_mutating = False
        self.error_message: Optional[str] = None

        self._latest_request = 0
        self.refresher: Optional[AutoRefresher] = None
        if refresh_seconds:
            self.refresher = AutoRefresher(self.refresh, refresh_seconds, name=f"{self.name}-refresh")

    async def fetch(self) -> Any:
        raise NotImplementedError

    def apply(self, data: Any) -> None:
        raise NotImplementedError

    async def refresh(self) -> bool:
        """
        Re-fetch the view's data.

        A response (or failure) that arrives after a newer fetch was started
        is dropped.

        Returns:
            True if this fetch's result was applied
        """
        self._latest_request += 1
        request_id = self._latest_request
        self.is_loading = True

        try:
            data = await self.fetch()
        except AppException as exc:
            if request_id != self._latest_request:
                logger.debug("%s: dropping failure of stale fetch #%d", self.name, request_id)
                return False
            self.error_message = exc.message
            logger.warning("%s fetch failed: %s", self.name, exc.message)
            return False
        finally:
            if request_id == self._latest_request:
                self.is_loading = False

        if request_id != self._latest_request:
            logger.debug("%s: dropping stale fetch #%d (latest is #%d)", self.name, request_id, self._latest_request)
            return False

        self.apply(data)
        self.error_message = None
        return True

    def start_auto_refresh(self) -> None:
        if self.refresher is not None:
            self.refresher.start()

    async def stop_auto_refresh(self) -> None:
        if self.refresher is not None:
            await self.refresher.stop()

    async def _run_action(
        self,
        description: str,
        call: Callable[[], Awaitable[Any]],
        refresh_on_failure: bool = False,
    ) -> Any:
        """
        Run one mutation with auto-refresh paused, then re-fetch.

        On failure the message is kept in ``error_message`` and the error is
        re-raised. The snapshot is left as is unless ``refresh_on_failure``
        is set, for calls that may have partly applied on the backend.
        """
        if self.is_mutating:
            raise ActionInProgressError()

        self.is_mutating = True
        if self.refresher is not None:
            self.refresher.pause()
        try:
            try:
                result = await call()
            except AppException as exc:
                if refresh_on_failure:
                    await self.refresh()
                self.error_message = exc.message
                logger.warning("%s failed: %s", description, exc.message)
                raise
            logger.info("%s done", description)
            await self.refresh()
            return result
        finally:
            self.is_mutating = False
            if self.refresher is not None:
                self.refresher.resume()
