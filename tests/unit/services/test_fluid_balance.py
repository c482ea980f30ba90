from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from carescore.core.exceptions import CallerContractViolation
from carescore.schemas.clinical import FluidType, IntakeOutputRecord
from carescore.services.fluid_balance import fluid_balance, parse_intake_output_record


def record(kind: FluidType, amount: float, at: datetime) -> IntakeOutputRecord:
    return IntakeOutputRecord(type=kind, amount=amount, recorded_at=at)


def test_shift_and_day_totals() -> None:
    now = datetime(2024, 3, 5, 16, 30)
    records = [
        record(FluidType.intake, 500, datetime(2024, 3, 5, 15, 0)),   # this shift
        record(FluidType.output, 200, datetime(2024, 3, 5, 16, 0)),   # this shift
        record(FluidType.intake, 250, datetime(2024, 3, 5, 9, 0)),    # earlier shift
        record(FluidType.output, 400, datetime(2024, 3, 4, 17, 0)),   # within 24h
        record(FluidType.intake, 900, datetime(2024, 3, 4, 16, 0)),   # older than 24h
    ]

    summary = fluid_balance(records, now)

    assert summary.shift_start == datetime(2024, 3, 5, 15, 0)
    assert summary.total_intake_24h == 750
    assert summary.total_output_24h == 600
    assert summary.balance_24h == 150
    assert summary.total_intake_shift == 500
    assert summary.total_output_shift == 200
    assert summary.balance_shift == 300


def test_night_shift_started_previous_day() -> None:
    now = datetime(2024, 3, 5, 2, 0)
    records = [record(FluidType.intake, 100, now - timedelta(hours=2, minutes=30))]

    summary = fluid_balance(records, now)

    assert summary.shift_start == datetime(2024, 3, 4, 23, 0)
    assert summary.total_intake_shift == 100


def test_no_records() -> None:
    summary = fluid_balance([], datetime(2024, 3, 5, 8, 0))
    assert summary.balance_24h == 0
    assert summary.balance_shift == 0


def test_negative_amounts_are_a_contract_violation() -> None:
    with pytest.raises(CallerContractViolation) as excinfo:
        parse_intake_output_record({"type": "output", "amount": -10, "recorded_at": datetime(2024, 3, 5, 8, 0)})
    assert excinfo.value.fields == ("amount",)


def test_parsed_records_feed_the_summary() -> None:
    now = datetime(2024, 3, 5, 8, 0)
    parsed = parse_intake_output_record({"type": "intake", "amount": "120", "recorded_at": "2024-03-05T07:30:00"})

    assert parsed.amount == 120
    assert fluid_balance([parsed], now).total_intake_shift == 120
