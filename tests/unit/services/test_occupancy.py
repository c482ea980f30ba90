from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from carescore.core.exceptions import CallerContractViolation
from carescore.schemas.clinical import CapacitySource, OccupancySample, PendingOrders
from carescore.services.occupancy import (
    occupancy,
    outpatient_capacity,
    outpatient_occupancy,
    patients_per_nurse,
    pending_orders,
    percentage,
    unit_census,
    ward_census,
)


@pytest.mark.parametrize(
    "occupied, capacity, expected",
    [(0, 0, 0), (5, 0, 0), (3, 4, 75), (1, 8, 13), (1, 3, 33), (2, 3, 67), (4, 4, 100), (0, 10, 0)],
)
def test_percentage_rounds_half_up(occupied: int, capacity: int, expected: int) -> None:
    assert percentage(occupied, capacity) == expected


def test_occupancy_sample() -> None:
    assert occupancy(3, 4) == OccupancySample(occupied=3, capacity=4, percentage=75)
    assert occupancy(0, 0).percentage == 0


def test_negative_counts_are_rejected() -> None:
    with pytest.raises(CallerContractViolation) as excinfo:
        occupancy(1, -4)
    assert excinfo.value.fields == ("capacity",)


class TestOutpatientCapacity:
    def test_configured_capacity_wins(self) -> None:
        assert outpatient_capacity(active=10, configured=40) == (40, CapacitySource.configured)

    @pytest.mark.parametrize("configured", [None, 0])
    def test_unconfigured_falls_back_to_floor(self, configured: int | None) -> None:
        assert outpatient_capacity(active=5, configured=configured) == (24, CapacitySource.defaulted)

    def test_fallback_keeps_headroom_above_active(self) -> None:
        assert outpatient_capacity(active=30, configured=None) == (36, CapacitySource.defaulted)

    def test_occupancy_reports_provenance(self) -> None:
        sample = outpatient_occupancy(active=6, configured_capacity=None)
        assert sample == OccupancySample(
            occupied=6, capacity=24, percentage=25, capacity_source=CapacitySource.defaulted
        )


def test_ward_and_unit_census() -> None:
    wards = [ward_census("Ward A", 10, 7), ward_census("Ward B", 0, 0), ward_census("ICU", 4, 4)]

    assert wards[0].available_beds == 3
    assert wards[0].occupancy_rate == 70
    assert wards[1].occupancy_rate == 0

    unit = unit_census(wards)
    assert (unit.total_beds, unit.occupied_beds, unit.available_beds) == (14, 11, 3)
    assert unit.overall_occupancy == 79


def test_pending_orders_tally() -> None:
    assert pending_orders(labs=2, imaging=1, medications=4) == PendingOrders(total=7, labs=2, imaging=1, medications=4)


@pytest.mark.parametrize(
    "patients, nurses, expected",
    [(0, 0, "1:1"), (0, 3, "1:1"), (12, 3, "4:1"), (10, 4, "3:1"), (9, 4, "2:1"), (7, 0, "7:1")],
)
def test_patients_per_nurse(patients: int, nurses: int, expected: str) -> None:
    assert patients_per_nurse(patients, nurses) == expected


@given(st.integers(0, 10_000), st.integers(0, 10_000))
def test_percentage_matches_half_up_rounding(occupied: int, capacity: int) -> None:
    result = percentage(occupied, capacity)
    if capacity == 0:
        assert result == 0
    else:
        exact = occupied * 100 / capacity
        assert result - 0.5 <= exact < result + 0.5 + 1e-9
