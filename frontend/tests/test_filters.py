"""
Filter and pagination schema tests.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from frontend.app.core.exceptions import InputValidationError
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination, total_pages


def test_query_params_drop_empty_values():
    filters = PackageFilters(
        search_query=" Rojas ",
        status=PackageStatus.DELAYED,
        commune="Providencia",
        start_date=date(2024, 5, 1),
    )

    assert filters.to_query_params() == {
        "searchQuery": "Rojas",
        "statusFilter": "RETRASADO",
        "communeFilter": "Providencia",
        "startDate": "2024-05-01",
    }
    assert PackageFilters().to_query_params() == {}


def test_is_filtering():
    assert not PackageFilters().is_filtering
    assert not PackageFilters(search_query="   ").is_filtering
    assert PackageFilters(driver_id="drv-1").is_filtering
    assert PackageFilters(end_date=date(2024, 5, 1)).is_date_filtering


def test_date_range_validation():
    PackageFilters(start_date=date(2024, 5, 1), end_date=date(2024, 5, 1)).validate_range()

    with pytest.raises(InputValidationError) as exc_info:
        PackageFilters(start_date=date(2024, 5, 2), end_date=date(2024, 5, 1)).validate_range()

    assert exc_info.value.error_code == "ERR_VALIDATION"


def test_pagination_bounds():
    assert Pagination(page=3, limit=10).offset == 20
    assert Pagination(page=2, limit=10).to_query_params() == {"page": "2", "limit": "10"}

    with pytest.raises(ValidationError):
        Pagination(page=0)
    with pytest.raises(ValidationError):
        Pagination(limit=1000)
    with pytest.raises(ValidationError):
        Pagination(page=2, limit=0)


def test_total_pages():
    assert total_pages(0, 25) == 1
    assert total_pages(25, 25) == 1
    assert total_pages(26, 25) == 2
    assert total_pages(26, 0) == 1
