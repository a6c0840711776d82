"""
User roles enumeration.

Defines the role types known to the delivery platform.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        ADMIN: Full access to packages, users and pickups
        CLIENT: Creates packages, sees only their own
        DRIVER: Delivers packages and performs pickups
        FACTURACION: Billing staff
        RETIROS: Pickup planning staff
        AUXILIAR: Warehouse dispatch staff
    """
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"
    DRIVER = "DRIVER"
    FACTURACION = "FACTURACION"
    RETIROS = "RETIROS"
    AUXILIAR = "AUXILIAR"


class UserStatus(str, enum.Enum):
    """Account approval status."""
    PENDING = "PENDIENTE"
    APPROVED = "APROBADO"
    DISABLED = "DESHABILITADO"
