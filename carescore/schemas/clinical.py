from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# -------------------------
# Inputs
# -------------------------


class Consciousness(str, Enum):
    alert = "alert"
    not_alert = "not-alert"


class VitalsSnapshot(Frozen):
    """
    The latest set of vital signs recorded for one encounter.

    Owned by the caller. The rules never mutate it, and "no snapshot" is passed
    as None rather than as an empty snapshot.
    """
    systolic_bp: float
    heart_rate: float
    temperature: float
    oxygen_saturation: float
    diastolic_bp: Optional[float] = None
    respiratory_rate: Optional[float] = None
    consciousness: Consciousness = Consciousness.alert
    recorded_at: Optional[datetime] = None


class EarlyWarningInputs(Frozen):
    respiratory_rate: float
    oxygen_saturation: float
    temperature: float
    systolic_bp: float
    heart_rate: float
    consciousness: Consciousness


class FallRiskFactors(Frozen):
    # strict so a missing or "yes"/"no" value cannot quietly become a bool
    history_of_falls: StrictBool
    confusion: StrictBool
    mobility_issues: StrictBool
    medications: StrictBool
    age_over_65: StrictBool


class AssignedTaskRecord(Frozen):
    """A nurse's outstanding task as the task store hands it over."""
    id: Union[int, str]
    title: str
    priority: str
    due_date: datetime
    status: str = "pending"


class FluidType(str, Enum):
    intake = "intake"
    output = "output"


class IntakeOutputRecord(Frozen):
    type: FluidType
    amount: float = Field(ge=0)
    recorded_at: datetime
    category: Optional[str] = None


class EncounterType(str, Enum):
    emergency = "EMERGENCY"
    elective = "ELECTIVE"
    transfer = "TRANSFER"


# -------------------------
# Classifications
# -------------------------


class AcuityLevel(str, Enum):
    critical = "critical"
    high_risk = "high-risk"
    stable = "stable"
    routine = "routine"


class WardAcuityLevel(str, Enum):
    critical = "critical"
    high_risk = "high-risk"
    stable = "stable"


class PatientStatus(str, Enum):
    observation = "Observation"
    critical = "Critical"
    moderate = "Moderate"
    stable = "Stable"


class EwsSeverity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class FallRiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class AdmissionPriority(str, Enum):
    emergency = "emergency"
    urgent = "urgent"
    routine = "routine"


class EarlyWarningScore(Frozen):
    score: int = Field(ge=0)
    severity: EwsSeverity


class FallRiskAssessment(Frozen):
    score: int = Field(ge=0, le=10)
    risk: FallRiskLevel


class RiskDistribution(Frozen):
    critical: int = 0
    high: int = 0
    stable: int = 0
    routine: int = 0


# -------------------------
# Work items
# -------------------------
# A closed set of cases, one per batch kind plus the individual assigned task.
# The "kind" tag is the discriminator; everything a view needs to render a row
# lives on the item itself.


class OverdueMedicationBatch(Frozen):
    kind: Literal["overdue_medications"] = "overdue_medications"
    id: str = "overdue-meds"
    title: str = "Overdue Medications"
    type: str = "medication"
    priority: str = "high"
    due_time: str = "OVERDUE"
    overdue: bool = True
    count: int = Field(gt=0)


class UpcomingMedicationBatch(Frozen):
    kind: Literal["upcoming_medications"] = "upcoming_medications"
    id: str = "upcoming-meds"
    title: str = "Medications Due Soon"
    type: str = "medication"
    priority: str = "high"
    due_time: str = "Next 30 min"
    overdue: bool = False
    count: int = Field(gt=0)


class OverdueVitalsBatch(Frozen):
    kind: Literal["overdue_vitals"] = "overdue_vitals"
    id: str = "vitals-overdue"
    title: str = "Vital Signs Overdue"
    type: str = "vitals"
    priority: str = "high"
    due_time: str = ">8 hours"
    overdue: bool = True
    count: int = Field(gt=0)


class AssignedTask(Frozen):
    kind: Literal["assigned_task"] = "assigned_task"
    id: str
    title: str
    type: str = "assigned"
    priority: str
    due_time: str
    due_at: datetime
    overdue: bool
    count: int = 1


WorkItem = Annotated[
    Union[OverdueMedicationBatch, UpcomingMedicationBatch, OverdueVitalsBatch, AssignedTask],
    Field(discriminator="kind"),
]


class TaskQueue(Frozen):
    items: list[WorkItem]


# -------------------------
# Time, capacity and totals
# -------------------------


class ShiftWindow(Frozen):
    start: datetime
    end: datetime
    elapsed_minutes: int = Field(ge=0)
    remaining_minutes: int = Field(ge=0)
    elapsed: str
    remaining: str
    label: str


class CapacitySource(str, Enum):
    measured = "measured"
    configured = "configured"
    defaulted = "defaulted"


class OccupancySample(Frozen):
    occupied: int = Field(ge=0)
    capacity: int = Field(ge=0)
    percentage: int = Field(ge=0)
    # "defaulted" marks a heuristic capacity floor rather than a real figure
    capacity_source: CapacitySource = CapacitySource.measured


class WardCensus(Frozen):
    name: str
    total_beds: int = Field(ge=0)
    occupied_beds: int = Field(ge=0)
    available_beds: int
    occupancy_rate: int = Field(ge=0)


class UnitCensus(Frozen):
    wards: list[WardCensus]
    total_beds: int
    occupied_beds: int
    available_beds: int
    overall_occupancy: int


class PendingOrders(Frozen):
    total: int
    labs: int
    imaging: int
    medications: int


class FluidBalanceSummary(Frozen):
    shift_start: datetime
    total_intake_24h: float
    total_output_24h: float
    balance_24h: float
    total_intake_shift: float
    total_output_shift: float
    balance_shift: float
