"""
Driver workload split tests.
"""

from datetime import date

from frontend.app.services.driver_workload import EndOfDayWatcher, all_processed, split_workload
from frontend.tests.factories import BASE_TIME, make_package

TODAY = BASE_TIME.date()


def test_split_pending_and_closed_today():
    pending = make_package(status="EN_TRANSITO", driver_id="drv-1")
    delivered_today = make_package(status="ENTREGADO", driver_id="drv-1")
    problem_yesterday = make_package(
        status="PROBLEMA",
        driver_id="drv-1",
        history=[{"timestamp": "2024-05-09T18:00:00+00:00", "status": "PROBLEMA"}],
    )
    returned = make_package(status="DEVUELTO", driver_id="drv-1")

    workload = split_workload([pending, delivered_today, problem_yesterday, returned], today=TODAY)

    assert [p.id for p in workload.pending] == [pending.id]
    assert [p.id for p in workload.closed_today] == [delivered_today.id]
    assert workload.closed_count == 1
    assert workload.total_assigned == 4


def test_closed_history_uses_latest_event():
    package = make_package(
        status="ENTREGADO",
        history=[
            {"timestamp": "2024-05-10T08:00:00+00:00", "status": "EN_TRANSITO"},
            {"timestamp": "2024-05-11T09:30:00+00:00", "status": "ENTREGADO"},
        ],
    )

    assert split_workload([package], today=date(2024, 5, 11)).closed_today == [package]
    assert split_workload([package], today=TODAY).closed_today == []


def test_package_without_history_is_not_in_daily_history():
    package = make_package(status="ENTREGADO", history=[])

    assert split_workload([package], today=TODAY).closed_today == []


def test_all_processed():
    assert not all_processed([])
    assert all_processed([make_package(status="ENTREGADO"), make_package(status="PROBLEMA")])
    assert not all_processed([make_package(status="ENTREGADO"), make_package(status="EN_TRANSITO")])


def test_end_of_day_fires_once_on_transition():
    watcher = EndOfDayWatcher()
    in_transit = make_package(status="EN_TRANSITO")
    delivered = make_package(status="ENTREGADO")

    # First snapshot only primes the watcher
    assert not watcher.observe([delivered])
    assert not watcher.observe([in_transit, delivered])
    assert watcher.observe([make_package(status="PROBLEMA"), delivered])
    assert not watcher.observe([delivered])
