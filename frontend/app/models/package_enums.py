"""
Package-related enumerations.

Values are the wire values used by the delivery backend.
"""

import enum


class PackageStatus(str, enum.Enum):
    """
    Package status enumeration.

    Status flow:
        PENDIENTE → RETIRADO → EN_TRANSITO → ENTREGADO
        PROBLEMA → PENDIENTE_DEVOLUCION → DEVUELTO
    """
    PENDING = "PENDIENTE"
    PICKED_UP = "RETIRADO"
    IN_TRANSIT = "EN_TRANSITO"
    DELIVERED = "ENTREGADO"
    DELAYED = "RETRASADO"
    PROBLEM = "PROBLEMA"
    RETURN_PENDING = "PENDIENTE_DEVOLUCION"
    RETURNED = "DEVUELTO"


class ShippingType(str, enum.Enum):
    """Shipping service level."""
    SAME_DAY = "SAME_DAY"
    EXPRESS = "EXPRESS"
    NEXT_DAY = "NEXT_DAY"


class PackageSource(str, enum.Enum):
    """Where the package was created."""
    MANUAL = "MANUAL"
    MERCADO_LIBRE = "MERCADO_LIBRE"
    SHOPIFY = "SHOPIFY"
    WOOCOMMERCE = "WOOCOMMERCE"
    FALABELLA = "FALABELLA"
