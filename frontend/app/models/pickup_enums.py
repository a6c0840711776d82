"""
Pickup-related enumerations.
"""

import enum


class PickupStatus(str, enum.Enum):
    """Pickup assignment status enumeration."""
    ASSIGNED = "ASIGNADO"  # Planned, driver not yet on the way
    EN_ROUTE = "EN_RUTA"  # Driver heading to the client
    PICKED_UP = "RETIRADO"  # Packages collected from the client
    AT_WAREHOUSE = "EN_BODEGA"  # Collected packages dropped at the warehouse
    NOT_PICKED_UP = "NO_RETIRADO"  # Visit failed


class PickupShift(str, enum.Enum):
    """Pickup shift enumeration."""
    MORNING = "MANANA"
    AFTERNOON = "TARDE"
    NIGHT = "NOCHE"
