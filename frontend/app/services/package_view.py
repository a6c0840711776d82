"""
Package list view state.

Holds everything the package management screen shows: the current page
snapshot, filters, pagination, the selection and the loading/mutation
flags. Every action is a single API call followed by a full re-fetch; the
view never patches its snapshot locally.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from frontend.app.core.config import settings
from frontend.app.core.exceptions import ActionNotAllowedError, InputValidationError
from frontend.app.domain.actions import ActionGuard, PackageAction, can_delete, can_delete_selection
from frontend.app.domain.ordering import sort_packages
from frontend.app.models.enums import UserRole
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination, total_pages
from frontend.app.schemas.package import Package, PackageUpdate
from frontend.app.schemas.user import UserResponse
from frontend.app.services.api_client import DeliveryApiClient
from frontend.app.services.base_view import BaseView

logger = logging.getLogger(__name__)

action_guard = ActionGuard()


def build_pagination(page: int, limit: int) -> Pagination:
    try:
        return Pagination(page=page, limit=limit)
    except ValidationError as exc:
        raise InputValidationError(
            f"Invalid page {page} with page size {limit}",
            details={"errors": exc.errors(include_url=False)}
        ) from exc


class PackageListView(BaseView):
    """
    View state for the package management screen.

    The user directory is loaded with the first fetch and again after a
    filter change, not on every poll.

    Usage:
        view = PackageListView(api)
        await view.refresh()
        view.start_auto_refresh()
        for package in view.ordered_packages:
            ...
    """

    name = "package-list"

    def __init__(
        self,
        api: DeliveryApiClient,
        page_size: Optional[int] = None,
        refresh_seconds: Optional[float] = None,
        base_filters: Optional[PackageFilters] = None,
    ):
        super().__init__(refresh_seconds or settings.package_refresh_seconds)
        self.api = api
        self.base_filters = base_filters or PackageFilters()
        self.filters = self.base_filters
        self.pagination = build_pagination(1, settings.default_page_size if page_size is None else page_size)

        self.packages: List[Package] = []
        self.total = 0
        self.users: List[UserResponse] = []
        self.selected_ids: Set[str] = set()
        self._users_loaded = False

    # Fetching

    async def fetch(self) -> Tuple[List[Package], int, List[UserResponse]]:
        packages, total = await self.api.list_packages(self.filters, self.pagination)
        users = self.users if self._users_loaded else await self.api.get_users()
        return packages, total, users

    def apply(self, data: Tuple[List[Package], int, List[UserResponse]]) -> None:
        self.packages, self.total, self.users = data
        self._users_loaded = True

    # Filters & pagination

    async def apply_filters(self, filters: PackageFilters) -> bool:
        """
        Replace the filters, go back to page 1 and clear the selection.

        Raises:
            InputValidationError if the date range is invalid; nothing is fetched
        """
        filters.validate_range()
        self.filters = filters
        self.pagination = build_pagination(1, self.pagination.limit)
        self.selected_ids.clear()
        self._users_loaded = False
        return await self.refresh()

    async def reset_filters(self) -> bool:
        return await self.apply_filters(self.base_filters)

    async def set_page(self, page: int) -> bool:
        if page < 1 or page > self.page_count:
            raise InputValidationError(f"Page {page} is out of range", details={"pages": self.page_count})
        self.pagination = build_pagination(page, self.pagination.limit)
        return await self.refresh()

    async def set_page_size(self, limit: int) -> bool:
        self.pagination = build_pagination(1, limit)
        self.selected_ids.clear()
        return await self.refresh()

    @property
    def page_count(self) -> int:
        return total_pages(self.total, self.pagination.limit)

    # Derived display state

    @property
    def ordered_packages(self) -> List[Package]:
        return sort_packages(self.packages)

    @property
    def empty_message(self) -> Optional[str]:
        if self.packages:
            return None
        if self.is_loading:
            return "Loading packages..."
        if self.filters.is_date_filtering:
            return "No shipments exist in the selected date range."
        if self.filters.is_filtering:
            return "No packages match the filters."
        return "No packages to show."

    @property
    def drivers(self) -> List[UserResponse]:
        return [u for u in self.users if u.role == UserRole.DRIVER and u.is_approved]

    @property
    def clients(self) -> List[UserResponse]:
        return [u for u in self.users if u.role == UserRole.CLIENT and u.is_approved]

    def user_name(self, user_id: Optional[str]) -> Optional[str]:
        if user_id is None:
            return None
        for user in self.users:
            if user.id == user_id:
                return user.name
        return None

    def communes(self) -> List[str]:
        return sorted({p.recipient_commune for p in self.packages if p.recipient_commune})

    def cities(self) -> List[str]:
        return sorted({p.recipient_city for p in self.packages if p.recipient_city})

    # Selection

    def toggle_selection(self, package_id: str) -> None:
        if package_id in self.selected_ids:
            self.selected_ids.discard(package_id)
        else:
            self.selected_ids.add(package_id)

    def clear_selection(self) -> None:
        self.selected_ids.clear()

    @property
    def is_all_on_page_selected(self) -> bool:
        if not self.packages:
            return False
        return all(p.id in self.selected_ids for p in self.packages)

    @property
    def is_partially_selected(self) -> bool:
        some = any(p.id in self.selected_ids for p in self.packages)
        return some and not self.is_all_on_page_selected

    def toggle_select_all_on_page(self) -> None:
        page_ids = {p.id for p in self.packages}
        if self.is_all_on_page_selected:
            self.selected_ids -= page_ids
        else:
            self.selected_ids |= page_ids

    @property
    def selected_packages(self) -> List[Package]:
        return [p for p in self.packages if p.id in self.selected_ids]

    @property
    def can_delete_selected(self) -> bool:
        return can_delete_selection(self.selected_packages)

    # Actions

    async def assign_driver(self, package: Package, driver_id: Optional[str], delivery_date: date) -> Package:
        action_guard.enforce(PackageAction.REASSIGN_DRIVER, package)
        return await self._run_action(
            f"Assign driver to {package.id}",
            lambda: self.api.assign_driver(package.id, driver_id, delivery_date),
        )

    async def mark_for_return(self, package: Package) -> Package:
        action_guard.enforce(PackageAction.MARK_FOR_RETURN, package)
        return await self._run_action(
            f"Mark {package.id} for return",
            lambda: self.api.update_package_status(package.id, PackageStatus.RETURN_PENDING),
        )

    async def confirm_return(self, package: Package, confirmation: Dict[str, Any]) -> Package:
        action_guard.enforce(PackageAction.CONFIRM_RETURN, package)
        return await self._run_action(
            f"Confirm return of {package.id}",
            lambda: self.api.update_package_status(package.id, PackageStatus.RETURNED, confirmation),
        )

    async def edit_package(self, package: Package, changes: PackageUpdate) -> Package:
        action_guard.enforce(PackageAction.EDIT, package)
        return await self._run_action(
            f"Edit {package.id}",
            lambda: self.api.update_package(package.id, changes),
        )

    async def delete_package(self, package: Package) -> None:
        action_guard.enforce(PackageAction.DELETE, package)
        await self._run_action(
            f"Delete {package.id}",
            lambda: self.api.delete_package(package.id),
        )
        self.selected_ids.discard(package.id)

    async def bulk_assign_driver(self, driver_id: str, delivery_date: date) -> Optional[str]:
        """Assign every selected package to one driver, then clear the selection."""
        package_ids = sorted(self.selected_ids)
        if not package_ids:
            raise InputValidationError("Select at least one package to assign")
        message = await self._run_action(
            f"Assign {len(package_ids)} packages to {driver_id}",
            lambda: self.api.batch_assign_driver(package_ids, driver_id, delivery_date),
        )
        self.selected_ids.clear()
        return message

    async def delete_selected(self) -> int:
        """
        Delete every selected package; only offered when all are pending.

        Packages are deleted one request at a time, stopping at the first
        failure. Deleted packages leave the selection as they go and the
        view re-fetches either way, so a failure leaves the remaining
        packages selected for a retry.

        Returns:
            Number of packages deleted
        """
        selected = self.selected_packages
        if not selected:
            raise InputValidationError("Select at least one package to delete")
        if not can_delete_selection(selected):
            blocking = next(p for p in selected if not can_delete(p))
            raise ActionNotAllowedError(
                action=PackageAction.DELETE.value,
                package_id=blocking.id,
                status=blocking.status.value
            )

        deleted: List[str] = []

        async def delete_one_by_one():
            for package in selected:
                await self.api.delete_package(package.id)
                deleted.append(package.id)
                self.selected_ids.discard(package.id)

        await self._run_action(
            f"Delete {len(selected)} packages",
            delete_one_by_one,
            refresh_on_failure=True,
        )
        return len(deleted)
