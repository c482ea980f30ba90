from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "CareScore"
    environment: str = "dev"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Operational knobs. The clinical thresholds themselves are module
    # constants in carescore.services and are not configurable.
    shift_anchor_hour: int = Field(default=7, ge=0, le=23)
    shift_length_hours: int = Field(default=8, ge=1, le=24)
    vitals_overdue_hours: int = Field(default=8, gt=0)
    vitals_due_hours: int = Field(default=6, gt=0)
    upcoming_medication_window_minutes: int = Field(default=30, gt=0)
    assigned_task_limit: int = Field(default=3, ge=0)
    outpatient_capacity_floor: int = Field(default=24, ge=0)
    outpatient_capacity_headroom: int = Field(default=6, ge=0)

    model_config = SettingsConfigDict(env_prefix="CARESCORE_", env_file=".env", extra="ignore")


settings = Settings()
