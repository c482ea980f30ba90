"""
Intake/output totals for one encounter.

Two windows: the last 24 hours, and "this shift" on the 07:00 / 15:00 /
23:00 rota (see carescore.services.shift.rota_shift_start). A record sitting
exactly on a window's start counts inside it.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping

from carescore.core.exceptions import validate_contract
from carescore.core.logging import get_logger
from carescore.schemas.clinical import FluidBalanceSummary, FluidType, IntakeOutputRecord
from carescore.services.shift import rota_shift_start

logger = get_logger(__name__)


def parse_intake_output_record(data: Mapping[str, Any]) -> IntakeOutputRecord:
    """Typed record from a form or JSON row; a negative amount is a contract violation."""
    return validate_contract(IntakeOutputRecord, data, "Intake/output record")


def _total(records: list[IntakeOutputRecord], kind: FluidType, since: datetime) -> float:
    return sum(r.amount for r in records if r.type == kind and r.recorded_at >= since)


def fluid_balance(records: Iterable[IntakeOutputRecord], now: datetime) -> FluidBalanceSummary:
    records = list(records)
    day_start = now - timedelta(hours=24)
    shift_start = rota_shift_start(now)

    intake_24h = _total(records, FluidType.intake, day_start)
    output_24h = _total(records, FluidType.output, day_start)
    intake_shift = _total(records, FluidType.intake, shift_start)
    output_shift = _total(records, FluidType.output, shift_start)

    logger.debug("fluid_balance", records=len(records), shift_start=shift_start.isoformat())

    return FluidBalanceSummary(
        shift_start=shift_start,
        total_intake_24h=intake_24h,
        total_output_24h=output_24h,
        balance_24h=intake_24h - output_24h,
        total_intake_shift=intake_shift,
        total_output_shift=output_shift,
        balance_shift=intake_shift - output_shift,
    )
