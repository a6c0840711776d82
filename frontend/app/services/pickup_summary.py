"""
Pickup planning summaries.

Pure functions over the pickup runs of a day: per-driver grouping and
totals, pending packages per client and the clients still free to be
scheduled.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from frontend.app.models.enums import UserRole
from frontend.app.models.package_enums import PackageStatus
from frontend.app.models.pickup_enums import PickupShift, PickupStatus
from frontend.app.schemas.package import Package
from frontend.app.schemas.pickup import PickupAssignment, PickupRun
from frontend.app.schemas.user import UserResponse


@dataclass
class DriverPickups:
    driver_id: str
    driver_name: str
    by_shift: Dict[PickupShift, List[PickupAssignment]] = field(default_factory=dict)

    @property
    def assignments(self) -> List[PickupAssignment]:
        return [a for shift_assignments in self.by_shift.values() for a in shift_assignments]

    @property
    def total(self) -> int:
        return len(self.assignments)

    @property
    def completed(self) -> int:
        return sum(1 for a in self.assignments if a.status == PickupStatus.PICKED_UP)

    @property
    def cost(self) -> float:
        return sum(a.cost or 0 for a in self.assignments)

    @property
    def packages_picked_up(self) -> int:
        return sum(a.packages_picked_up or 0 for a in self.assignments)


def group_by_driver(runs: Iterable[PickupRun]) -> Dict[str, DriverPickups]:
    """
    Group run assignments by driver, then by shift.

    Drivers keep the order in which they first appear in ``runs``.
    """
    grouped: Dict[str, DriverPickups] = {}
    for run in runs:
        entry = grouped.get(run.driver_id)
        if entry is None:
            entry = grouped[run.driver_id] = DriverPickups(run.driver_id, run.driver_name)
        entry.by_shift.setdefault(run.shift, []).extend(run.assignments)
    return grouped


def total_packages_picked_up(runs: Iterable[PickupRun]) -> int:
    return sum(a.packages_picked_up or 0 for run in runs for a in run.assignments)


def pending_packages_by_client(packages: Iterable[Package]) -> Dict[str, int]:
    """Count still-pending packages per creating client."""
    counts: Dict[str, int] = defaultdict(int)
    for package in packages:
        if package.creator_id and package.status == PackageStatus.PENDING:
            counts[package.creator_id] += 1
    return dict(counts)


def scheduled_client_ids(runs: Iterable[PickupRun]) -> Set[str]:
    # A failed pickup frees the client for another run the same day
    return {
        a.client_id
        for run in runs
        for a in run.assignments
        if a.status != PickupStatus.NOT_PICKED_UP
    }


def clients_available_for_assignment(
    users: Sequence[UserResponse],
    runs: Iterable[PickupRun],
    search: str = "",
) -> List[UserResponse]:
    """
    Approved clients not yet scheduled for a pickup, sorted by name.

    Args:
        users: User directory
        runs: Every pickup run of the day
        search: Optional case-insensitive name filter
    """
    taken = scheduled_client_ids(runs)
    needle = search.strip().lower()
    available = [
        u for u in users
        if u.role == UserRole.CLIENT
        and u.is_approved
        and u.id not in taken
        and needle in u.name.lower()
    ]
    return sorted(available, key=lambda u: u.name.lower())
