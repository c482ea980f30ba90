from __future__ import annotations

import pytest
from pydantic import ValidationError

from carescore.core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CARESCORE_SHIFT_ANCHOR_HOUR", "CARESCORE_LOG_LEVEL", "CARESCORE_ASSIGNED_TASK_LIMIT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.app_name == "CareScore"
    assert settings.shift_anchor_hour == 7
    assert settings.shift_length_hours == 8
    assert settings.assigned_task_limit == 3
    assert settings.outpatient_capacity_floor == 24
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARESCORE_SHIFT_ANCHOR_HOUR", "19")
    monkeypatch.setenv("CARESCORE_LOG_FORMAT", "console")

    settings = Settings(_env_file=None)

    assert settings.shift_anchor_hour == 19
    assert settings.log_format == "console"


def test_invalid_values_fail_at_startup(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARESCORE_SHIFT_ANCHOR_HOUR", "25")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
