"""
Occupancy and unit tallies.

Small arithmetic over counts that the persistence layer already fetched:
bed and slot occupancy, ward census, pending orders and the nurse staffing
ratio. All percentages are rounded half up and a zero capacity gives 0%.
"""

from __future__ import annotations

from typing import Iterable, Optional

from carescore.core.config import settings
from carescore.core.exceptions import CallerContractViolation
from carescore.core.logging import get_logger
from carescore.schemas.clinical import (
    CapacitySource,
    OccupancySample,
    PendingOrders,
    UnitCensus,
    WardCensus,
)

logger = get_logger(__name__)


def _require_non_negative(**counts: int) -> None:
    bad = [name for name, value in counts.items() if value < 0]
    if bad:
        detail = ", ".join(f"{name}={counts[name]}" for name in bad)
        raise CallerContractViolation(f"Counts cannot be negative: {detail}", fields=bad)


def _round_div(numerator: int, denominator: int) -> int:
    # half up, integer only
    return (2 * numerator + denominator) // (2 * denominator)


def percentage(part: int, whole: int) -> int:
    """round(part / whole * 100) with 0 for an empty whole."""
    if whole <= 0:
        return 0
    return _round_div(part * 100, whole)


def occupancy(
    occupied: int,
    capacity: int,
    capacity_source: CapacitySource = CapacitySource.measured,
) -> OccupancySample:
    _require_non_negative(occupied=occupied, capacity=capacity)
    return OccupancySample(
        occupied=occupied,
        capacity=capacity,
        percentage=percentage(occupied, capacity),
        capacity_source=capacity_source,
    )


def outpatient_capacity(
    active: int,
    configured: Optional[int],
    floor: Optional[int] = None,
    headroom: Optional[int] = None,
) -> tuple[int, CapacitySource]:
    """
    Outpatient slot capacity for the day.

    When no slots are configured we fall back to max(24, active + 6). That
    number is a placeholder, not a measurement, so it comes back tagged
    CapacitySource.defaulted. Swapping in real configured capacity later only
    means passing `configured`.
    """
    _require_non_negative(active=active)
    if configured is not None and configured > 0:
        return configured, CapacitySource.configured

    floor = settings.outpatient_capacity_floor if floor is None else floor
    headroom = settings.outpatient_capacity_headroom if headroom is None else headroom

    logger.debug("outpatient_capacity_defaulted", active=active)
    return max(floor, active + headroom), CapacitySource.defaulted


def outpatient_occupancy(active: int, configured_capacity: Optional[int]) -> OccupancySample:
    capacity, source = outpatient_capacity(active, configured_capacity)
    return occupancy(active, capacity, capacity_source=source)


def ward_census(name: str, total_beds: int, occupied_beds: int) -> WardCensus:
    _require_non_negative(total_beds=total_beds, occupied_beds=occupied_beds)
    return WardCensus(
        name=name,
        total_beds=total_beds,
        occupied_beds=occupied_beds,
        available_beds=total_beds - occupied_beds,
        occupancy_rate=percentage(occupied_beds, total_beds),
    )


def unit_census(wards: Iterable[WardCensus]) -> UnitCensus:
    wards = list(wards)
    total = sum(w.total_beds for w in wards)
    occupied = sum(w.occupied_beds for w in wards)
    return UnitCensus(
        wards=wards,
        total_beds=total,
        occupied_beds=occupied,
        available_beds=total - occupied,
        overall_occupancy=percentage(occupied, total),
    )


def pending_orders(labs: int, imaging: int, medications: int) -> PendingOrders:
    _require_non_negative(labs=labs, imaging=imaging, medications=medications)
    return PendingOrders(
        total=labs + imaging + medications,
        labs=labs,
        imaging=imaging,
        medications=medications,
    )


def patients_per_nurse(patients: int, nurses: int) -> str:
    """Staffing ratio as "N:1". Never reports less than 1:1."""
    _require_non_negative(patients=patients, nurses=nurses)
    ratio = max(1, _round_div(patients, max(1, nurses)))
    return f"{ratio}:1"
