"""
Acuity classification from the latest vital signs.

Three classifiers live here and they are NOT interchangeable:

- classify_acuity(): the 4-tier nurse dashboard rule
  (critical / high-risk / stable / routine).
- classify_ward_acuity(): the 3-tier ward and bed view rule, which only looks
  at SpO2 and systolic BP.
- determine_patient_status(): the live patient board, which uses the same
  thresholds as the 4-tier rule but skips any reading recorded as zero.

The first two historically disagree (a heart rate of 135 is critical on the
dashboard and stable on the ward board). That disagreement has been raised
and is not resolved here; each call site keeps its own rule.

Missing vitals are never an error. Each rule maps "no snapshot" to its own
conservative default.
"""

from __future__ import annotations

from typing import Iterable, Optional

from carescore.core.logging import get_logger
from carescore.schemas.clinical import (
    AcuityLevel,
    PatientStatus,
    RiskDistribution,
    VitalsSnapshot,
    WardAcuityLevel,
)

logger = get_logger(__name__)


# -------------------------
# Thresholds
# -------------------------
# All comparisons are strict: SpO2 90 is not critical, 89 is.

CRITICAL_SPO2_BELOW = 90
CRITICAL_SYSTOLIC = (90, 180)
CRITICAL_HEART_RATE = (40, 130)
CRITICAL_TEMPERATURE_ABOVE = 39.5

HIGH_RISK_SPO2_BELOW = 95
HIGH_RISK_SYSTOLIC = (100, 160)
HIGH_RISK_HEART_RATE = (50, 110)
HIGH_RISK_TEMPERATURE_ABOVE = 38.5

STABLE_SPO2_BELOW = 97

# alert badge bands
ALERT_SPO2_BELOW = 95
ALERT_SYSTOLIC = (90, 160)
ALERT_HEART_RATE = (50, 110)
ALERT_TEMPERATURE_ABOVE = 38.5


def _outside(value: float, band: tuple[float, float]) -> bool:
    low, high = band
    return value < low or value > high


def _is_critical(v: VitalsSnapshot) -> bool:
    return (
        v.oxygen_saturation < CRITICAL_SPO2_BELOW
        or _outside(v.systolic_bp, CRITICAL_SYSTOLIC)
        or _outside(v.heart_rate, CRITICAL_HEART_RATE)
        or v.temperature > CRITICAL_TEMPERATURE_ABOVE
    )


def _is_high_risk(v: VitalsSnapshot) -> bool:
    return (
        v.oxygen_saturation < HIGH_RISK_SPO2_BELOW
        or _outside(v.systolic_bp, HIGH_RISK_SYSTOLIC)
        or _outside(v.heart_rate, HIGH_RISK_HEART_RATE)
        or v.temperature > HIGH_RISK_TEMPERATURE_ABOVE
    )


def classify_acuity(vitals: Optional[VitalsSnapshot]) -> AcuityLevel:
    """
    Dashboard acuity tier.

    No snapshot means "stable", not "routine": we do not know the patient is
    fine, so they stay visible. Tiers are checked critical first and the first
    match wins.
    """
    if vitals is None:
        level = AcuityLevel.stable
    elif _is_critical(vitals):
        level = AcuityLevel.critical
    elif _is_high_risk(vitals):
        level = AcuityLevel.high_risk
    elif vitals.oxygen_saturation < STABLE_SPO2_BELOW:
        level = AcuityLevel.stable
    else:
        level = AcuityLevel.routine

    logger.debug("acuity_classified", acuity=level.value, has_vitals=vitals is not None)
    return level


def classify_ward_acuity(vitals: Optional[VitalsSnapshot]) -> WardAcuityLevel:
    """Ward/bed board tier. Only SpO2 and systolic BP are considered."""
    if vitals is None:
        return WardAcuityLevel.stable

    if vitals.oxygen_saturation < CRITICAL_SPO2_BELOW or _outside(vitals.systolic_bp, CRITICAL_SYSTOLIC):
        return WardAcuityLevel.critical

    if vitals.oxygen_saturation < HIGH_RISK_SPO2_BELOW or _outside(vitals.systolic_bp, HIGH_RISK_SYSTOLIC):
        return WardAcuityLevel.high_risk

    return WardAcuityLevel.stable


def determine_patient_status(vitals: Optional[VitalsSnapshot]) -> PatientStatus:
    """
    Status pill on the live patient board.

    Uses the dashboard critical/high-risk thresholds, except that a reading of
    0 counts as "not recorded" and cannot trigger anything.
    """
    if vitals is None:
        return PatientStatus.observation

    spo2 = vitals.oxygen_saturation
    sbp = vitals.systolic_bp
    hr = vitals.heart_rate
    temp = vitals.temperature

    if (
        (spo2 and spo2 < CRITICAL_SPO2_BELOW)
        or (sbp and _outside(sbp, CRITICAL_SYSTOLIC))
        or (hr and _outside(hr, CRITICAL_HEART_RATE))
        or (temp and temp > CRITICAL_TEMPERATURE_ABOVE)
    ):
        return PatientStatus.critical

    if (
        (spo2 and spo2 < HIGH_RISK_SPO2_BELOW)
        or (sbp and _outside(sbp, HIGH_RISK_SYSTOLIC))
        or (hr and _outside(hr, HIGH_RISK_HEART_RATE))
        or (temp and temp > HIGH_RISK_TEMPERATURE_ABOVE)
    ):
        return PatientStatus.moderate

    return PatientStatus.stable


def alert_count(vitals: Optional[VitalsSnapshot]) -> int:
    """
    Number of abnormal-vitals flags for a patient's alert badge.

    A missing snapshot is itself one alert. Otherwise each of SpO2, systolic
    BP, heart rate and temperature adds at most one flag, however far out of
    range it is.
    """
    if vitals is None:
        return 1

    flags = (
        vitals.oxygen_saturation < ALERT_SPO2_BELOW,
        _outside(vitals.systolic_bp, ALERT_SYSTOLIC),
        _outside(vitals.heart_rate, ALERT_HEART_RATE),
        vitals.temperature > ALERT_TEMPERATURE_ABOVE,
    )
    return sum(flags)


def risk_distribution(levels: Iterable[AcuityLevel]) -> RiskDistribution:
    counts = {level: 0 for level in AcuityLevel}
    for level in levels:
        counts[AcuityLevel(level)] += 1

    return RiskDistribution(
        critical=counts[AcuityLevel.critical],
        high=counts[AcuityLevel.high_risk],
        stable=counts[AcuityLevel.stable],
        routine=counts[AcuityLevel.routine],
    )
