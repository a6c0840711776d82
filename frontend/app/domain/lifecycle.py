"""
Package status lifecycle.

The backend performs every transition; this table only tells the views
which next states can legitimately follow the current one.
"""

from typing import FrozenSet

from frontend.app.models.package_enums import PackageStatus


TRANSITIONS = {
    # RETURN_PENDING from PENDING is an admin override
    PackageStatus.PENDING: frozenset({
        PackageStatus.PICKED_UP,
        PackageStatus.PROBLEM,
        PackageStatus.RETURN_PENDING,
    }),
    PackageStatus.PICKED_UP: frozenset({PackageStatus.IN_TRANSIT}),
    PackageStatus.IN_TRANSIT: frozenset({
        PackageStatus.DELIVERED,
        PackageStatus.PROBLEM,
    }),
    PackageStatus.DELAYED: frozenset({
        PackageStatus.IN_TRANSIT,
        PackageStatus.DELIVERED,
        PackageStatus.PROBLEM,
    }),
    # RETURN_PENDING is an admin action, IN_TRANSIT a delivery retry
    PackageStatus.PROBLEM: frozenset({
        PackageStatus.RETURN_PENDING,
        PackageStatus.IN_TRANSIT,
    }),
    PackageStatus.RETURN_PENDING: frozenset({PackageStatus.RETURNED}),
    PackageStatus.DELIVERED: frozenset(),
    PackageStatus.RETURNED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def allowed_transitions(status: PackageStatus) -> FrozenSet[PackageStatus]:
    return TRANSITIONS[status]


def can_transition(current: PackageStatus, target: PackageStatus) -> bool:
    """Check whether ``target`` may follow ``current``."""
    return target in TRANSITIONS[current]


def is_terminal(status: PackageStatus) -> bool:
    return status in TERMINAL_STATUSES
