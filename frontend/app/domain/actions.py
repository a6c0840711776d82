"""
Status-gated action availability.

Pure predicates deciding which package actions a view may offer. Nothing
here mutates a package; the views refuse invalid actions before any request
reaches the backend.
"""

import enum
from typing import Callable, Dict, Iterable, Set

from frontend.app.core.exceptions import ActionNotAllowedError
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.package import Package


class PackageAction(str, enum.Enum):
    """Actions a package row can offer."""
    EDIT = "EDIT"
    DELETE = "DELETE"
    REASSIGN_DRIVER = "REASSIGN_DRIVER"
    MARK_FOR_RETURN = "MARK_FOR_RETURN"
    CONFIRM_RETURN = "CONFIRM_RETURN"


CLOSED_STATUSES = frozenset({PackageStatus.DELIVERED, PackageStatus.RETURNED})


def can_edit(package: Package) -> bool:
    return package.status == PackageStatus.PENDING


def can_delete(package: Package) -> bool:
    return package.status == PackageStatus.PENDING


def can_reassign_driver(package: Package) -> bool:
    return package.status not in CLOSED_STATUSES


def can_mark_for_return(package: Package) -> bool:
    return package.status == PackageStatus.PROBLEM


def can_confirm_return(package: Package) -> bool:
    return package.status == PackageStatus.RETURN_PENDING


ACTION_RULES: Dict[PackageAction, Callable[[Package], bool]] = {
    PackageAction.EDIT: can_edit,
    PackageAction.DELETE: can_delete,
    PackageAction.REASSIGN_DRIVER: can_reassign_driver,
    PackageAction.MARK_FOR_RETURN: can_mark_for_return,
    PackageAction.CONFIRM_RETURN: can_confirm_return,
}


def is_action_available(action: PackageAction, package: Package) -> bool:
    return ACTION_RULES[action](package)


def available_actions(package: Package) -> Set[PackageAction]:
    """All actions the package's current status allows."""
    return {action for action, rule in ACTION_RULES.items() if rule(package)}


def can_delete_selection(packages: Iterable[Package]) -> bool:
    """
    Bulk delete is offered only for a non-empty selection of pending packages.
    """
    packages = list(packages)
    if not packages:
        return False
    return all(can_delete(package) for package in packages)


class ActionGuard:
    """
    Refuses actions that are invalid for a package's current status.

    Usage:
        action_guard = ActionGuard()

        async def mark_for_return(package):
            action_guard.enforce(PackageAction.MARK_FOR_RETURN, package)
            await client.update_package_status(package.id, PackageStatus.RETURN_PENDING)
    """

    def enforce(self, action: PackageAction, package: Package) -> None:
        """
        Enforce the action gate, raise if the action is not available.

        Args:
            action: Action the user asked for
            package: Current snapshot of the package

        Raises:
            ActionNotAllowedError if the gate refuses the action
        """
        if not is_action_available(action, package):
            raise ActionNotAllowedError(
                action=action.value,
                package_id=package.id,
                status=package.status.value
            )
