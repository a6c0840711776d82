"""
Package display ordering.

Surfaces urgent and actionable packages first. The order is recomputed from
the current snapshot every time a view asks for it; nothing is persisted.
"""

from typing import Iterable, List, Tuple

from frontend.app.models.package_enums import PackageStatus, ShippingType
from frontend.app.schemas.package import Package, as_utc


URGENT_SHIPPING_TYPES = frozenset({ShippingType.EXPRESS, ShippingType.SAME_DAY})

# Lower number sorts first
STATUS_PRIORITY = {
    PackageStatus.PROBLEM: 1,
    PackageStatus.RETURN_PENDING: 2,
    PackageStatus.PENDING: 3,
    PackageStatus.DELAYED: 4,
    PackageStatus.PICKED_UP: 5,
    PackageStatus.IN_TRANSIT: 6,
    PackageStatus.DELIVERED: 7,
    PackageStatus.RETURNED: 8,
}


def is_urgent(package: Package) -> bool:
    """
    Check whether a package must float to the top of the list.

    Urgent packages are fast-service shipments still waiting for a driver,
    and packages waiting to be returned to their sender.
    """
    if package.status == PackageStatus.RETURN_PENDING:
        return True
    return (
        package.shipping_type in URGENT_SHIPPING_TYPES
        and package.status == PackageStatus.PENDING
        and not package.has_driver
    )


def sort_key(package: Package) -> Tuple[bool, int, float]:
    return (
        not is_urgent(package),
        STATUS_PRIORITY[package.status],
        -as_utc(package.updated_at).timestamp(),
    )


def sort_packages(packages: Iterable[Package]) -> List[Package]:
    """
    Return the packages in display order.

    Rules, first decisive one wins:
        1. Urgent before non-urgent
        2. Status priority (Problem first, Returned last)
        3. Most recently updated first

    Args:
        packages: Snapshot to order; it is not modified

    Returns:
        New list with the same items
    """
    return sorted(packages, key=sort_key)
