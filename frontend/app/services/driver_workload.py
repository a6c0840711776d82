"""
Driver workload helpers.

Splits a driver's assigned packages into what is still to be done and what
was closed today, and notices the moment the last package is processed.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.package import Package, as_utc

PROCESSED_STATUSES = frozenset({PackageStatus.DELIVERED, PackageStatus.PROBLEM})
NOT_PENDING_STATUSES = PROCESSED_STATUSES | {PackageStatus.RETURNED}


@dataclass
class DriverWorkload:
    pending: List[Package] = field(default_factory=list)
    closed_today: List[Package] = field(default_factory=list)
    total_assigned: int = 0

    @property
    def closed_count(self) -> int:
        return len(self.closed_today)


def is_processed(package: Package) -> bool:
    return package.status in PROCESSED_STATUSES


def is_open(package: Package) -> bool:
    """Still on the driver's to-do list."""
    return package.status not in NOT_PENDING_STATUSES


def all_processed(packages: Sequence[Package]) -> bool:
    """True when there is at least one package and every one is delivered or reported."""
    return bool(packages) and all(is_processed(p) for p in packages)


def closed_on(package: Package, day: date) -> bool:
    """Whether the package was closed (delivered / problem) on ``day``, by its latest event."""
    if not is_processed(package):
        return False
    event = package.latest_event
    if event is None:
        return False
    return as_utc(event.timestamp).date() == day


def split_workload(packages: Sequence[Package], today: Optional[date] = None) -> DriverWorkload:
    """
    Split a driver's packages for the day.

    Args:
        packages: Packages currently assigned to the driver
        today: Day to build the history for (defaults to the current UTC date)

    Returns:
        DriverWorkload with pending packages and the ones closed today
    """
    today = today or datetime.now(timezone.utc).date()
    return DriverWorkload(
        pending=[p for p in packages if is_open(p)],
        closed_today=[p for p in packages if closed_on(p, today)],
        total_assigned=len(packages),
    )


class EndOfDayWatcher:
    """
    Tracks successive snapshots of a driver's packages.

    observe() returns True exactly when a snapshot completes the day, i.e.
    everything is processed now but was not in the previous snapshot. The
    first snapshot only primes the watcher.
    """

    def __init__(self):
        self._previous: Optional[List[Package]] = None

    def observe(self, packages: Sequence[Package]) -> bool:
        previous = self._previous
        self._previous = list(packages)
        if previous is None:
            return False
        return all_processed(packages) and not all_processed(previous)
