"""
Early Warning Score and fall risk.

Both are plain banded point tables. Every parameter is required: a missing
value is a caller bug, and scoring it as zero would make a deteriorating
patient look better than they are. parse_* helpers turn a loose mapping (form
data, a JSON body) into the typed inputs and raise CallerContractViolation
naming the missing or malformed fields.

Out-of-range numbers (a heart rate of -5) are not rejected. They are scored
through the tables as they are; range validation belongs upstream.
"""

from __future__ import annotations

from typing import Any, Mapping

from carescore.core.exceptions import validate_contract
from carescore.core.logging import get_logger
from carescore.schemas.clinical import (
    Consciousness,
    EarlyWarningInputs,
    EarlyWarningScore,
    EwsSeverity,
    FallRiskAssessment,
    FallRiskFactors,
    FallRiskLevel,
)

logger = get_logger(__name__)


# -------------------------
# Early Warning Score
# -------------------------


def _respiratory_points(rate: float) -> int:
    if rate <= 8 or rate >= 25:
        return 3
    if rate >= 21:
        return 2
    return 0


def _spo2_points(spo2: float) -> int:
    if spo2 <= 91:
        return 3
    if spo2 <= 93:
        return 2
    if spo2 <= 95:
        return 1
    return 0


def _temperature_points(temp: float) -> int:
    if temp <= 35.0:
        return 3
    if temp >= 39.1:
        return 2
    if temp >= 38.1:
        return 1
    return 0


def _heart_rate_points(rate: float) -> int:
    if rate <= 40 or rate >= 131:
        return 3
    if rate >= 111:
        return 2
    if rate >= 91:
        return 1
    return 0


def _consciousness_points(state: Consciousness) -> int:
    return 0 if state == Consciousness.alert else 3


# (minimum score, severity), checked top down
EWS_SEVERITY_BANDS: tuple[tuple[int, EwsSeverity], ...] = (
    (7, EwsSeverity.critical),
    (5, EwsSeverity.high),
    (3, EwsSeverity.medium),
)


def ews_severity(score: int) -> EwsSeverity:
    for floor, severity in EWS_SEVERITY_BANDS:
        if score >= floor:
            return severity
    return EwsSeverity.low


def early_warning_score(inputs: EarlyWarningInputs) -> EarlyWarningScore:
    """
    Sum the per-parameter points and band the total.

    Systolic BP is part of the required input set but has no row in the
    point table, so it never contributes points.
    """
    contributions = {
        "respiratory_rate": _respiratory_points(inputs.respiratory_rate),
        "oxygen_saturation": _spo2_points(inputs.oxygen_saturation),
        "temperature": _temperature_points(inputs.temperature),
        "heart_rate": _heart_rate_points(inputs.heart_rate),
        "consciousness": _consciousness_points(inputs.consciousness),
    }
    score = sum(contributions.values())
    severity = ews_severity(score)

    logger.debug("ews_calculated", score=score, severity=severity.value, **contributions)
    return EarlyWarningScore(score=score, severity=severity)


# -------------------------
# Fall risk
# -------------------------
# Max possible score is 10.

FALL_RISK_WEIGHTS: dict[str, int] = {
    "history_of_falls": 3,
    "confusion": 2,
    "mobility_issues": 2,
    "medications": 1,
    "age_over_65": 2,
}


def fall_risk_level(score: int) -> FallRiskLevel:
    if score >= 7:
        return FallRiskLevel.high
    if score >= 4:
        return FallRiskLevel.medium
    return FallRiskLevel.low


def assess_fall_risk(factors: FallRiskFactors) -> FallRiskAssessment:
    score = sum(weight for name, weight in FALL_RISK_WEIGHTS.items() if getattr(factors, name))
    risk = fall_risk_level(score)

    logger.debug("fall_risk_assessed", score=score, risk=risk.value)
    return FallRiskAssessment(score=score, risk=risk)


# -------------------------
# Parsing loose input
# -------------------------


def parse_early_warning_inputs(data: Mapping[str, Any]) -> EarlyWarningInputs:
    return validate_contract(EarlyWarningInputs, data, "Early warning score requires every parameter")


def parse_fall_risk_factors(data: Mapping[str, Any]) -> FallRiskFactors:
    return validate_contract(FallRiskFactors, data, "Fall risk assessment requires every factor")
