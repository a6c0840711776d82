"""
Package list filter and pagination schemas.

Builds the query string understood by ``GET /packages``.
"""

import math
from pydantic import BaseModel, Field, model_validator
from datetime import date
from typing import Optional, Dict
from frontend.app.core.config import settings
from frontend.app.core.exceptions import InputValidationError
from frontend.app.models.package_enums import PackageStatus


class PackageFilters(BaseModel):
    """Schema for the package list filter bar."""
    search_query: str = ""
    status: Optional[PackageStatus] = None
    driver_id: Optional[str] = None
    client_id: Optional[str] = None
    commune: Optional[str] = None
    city: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    class Config:
        frozen = True

    @property
    def is_filtering(self) -> bool:
        """True when any filter narrows the list."""
        return bool(
            self.search_query.strip()
            or self.status
            or self.driver_id
            or self.client_id
            or self.commune
            or self.city
            or self.is_date_filtering
        )

    @property
    def is_date_filtering(self) -> bool:
        return self.start_date is not None or self.end_date is not None

    def validate_range(self) -> None:
        """
        Reject a date range that ends before it starts.

        Raises:
            InputValidationError if start_date is after end_date
        """
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise InputValidationError(
                "Start date must not be after end date",
                details={"start_date": str(self.start_date), "end_date": str(self.end_date)}
            )

    def to_query_params(self) -> Dict[str, str]:
        params = {
            "searchQuery": self.search_query.strip(),
            "statusFilter": self.status.value if self.status else None,
            "driverFilter": self.driver_id,
            "clientFilter": self.client_id,
            "communeFilter": self.commune,
            "cityFilter": self.city,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }
        # Empty values are not sent at all
        return {key: value for key, value in params.items() if value}


class Pagination(BaseModel):
    """
    Page request.

    ``limit=0`` asks the backend for every matching package.
    """
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=settings.default_page_size, ge=0, le=settings.max_page_size)

    class Config:
        frozen = True

    @model_validator(mode="after")
    def unpaged_is_first_page(self):
        if self.limit == 0 and self.page != 1:
            raise ValueError("An unpaged request can only ask for page 1")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_query_params(self) -> Dict[str, str]:
        return {"page": str(self.page), "limit": str(self.limit)}


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show ``total`` items, at least one."""
    if limit <= 0:
        return 1
    return max(1, math.ceil(total / limit))
