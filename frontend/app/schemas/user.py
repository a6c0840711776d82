"""
User schemas.

Only the fields the views need to resolve names and list drivers/clients.
"""

from typing import Optional
from frontend.app.models.enums import UserRole, UserStatus
from frontend.app.schemas.package import CamelModel


class UserResponse(CamelModel):
    """Schema for a user as listed by the backend."""
    id: str
    name: str
    email: Optional[str] = None
    role: UserRole
    status: UserStatus
    phone: Optional[str] = None
    address: Optional[str] = None
    pickup_address: Optional[str] = None

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.APPROVED
