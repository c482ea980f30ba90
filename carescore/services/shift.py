"""
Shift window arithmetic.

Everything in the nursing views is anchored to "the current shift": how far
into it we are, how much is left, and which records count as "this shift"
for intake/output totals.

Two shift models exist side by side and they are kept as two functions on
purpose:

- shift_window(): a single fixed shift starting at 07:00 and lasting 8 hours.
  The nurse dashboard uses this for elapsed/remaining time, the shift label
  and shift completion.
- rota_shift_start(): the 07:00 / 15:00 / 23:00 three-shift rota. The
  intake/output (fluid balance) view uses this to decide where "this shift"
  begins.

They disagree for most of the evening and night. Which one should become the
single source of truth is still an open question, so neither is derived from
the other.

"now" is always passed in. Nothing here reads the wall clock.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from carescore.core.config import settings
from carescore.core.logging import get_logger
from carescore.schemas.clinical import ShiftWindow

logger = get_logger(__name__)


def _minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated. Negative if end is earlier."""
    seconds = (end - start).total_seconds()
    return int(seconds // 60) if seconds >= 0 else -int(-seconds // 60)


def _at_hour(moment: datetime, hour: int) -> datetime:
    return moment.replace(hour=hour, minute=0, second=0, microsecond=0)


def format_duration(minutes: int) -> str:
    """
    Render a minute count for display: "45m", "2h", "2h 15m".

    Zero and negative durations render as "0m".
    """
    if minutes <= 0:
        return "0m"

    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


def _clock_label(moment: datetime) -> str:
    # 12-hour clock, no leading zero, e.g. "7 AM", "3 PM", "12 AM"
    hour = moment.hour % 12 or 12
    return f"{hour} {'AM' if moment.hour < 12 else 'PM'}"


def shift_type(start_hour: int) -> str:
    if 6 <= start_hour < 14:
        return "Day Shift"
    if 14 <= start_hour < 22:
        return "Evening Shift"
    return "Night Shift"


def shift_label(start: datetime, end: datetime) -> str:
    return f"{shift_type(start.hour)} • {_clock_label(start)} - {_clock_label(end)}"


def shift_window(
    now: datetime,
    anchor_hour: Optional[int] = None,
    length_hours: Optional[int] = None,
) -> ShiftWindow:
    """
    The fixed single shift containing today's anchor hour.

    start is now's calendar day at the anchor hour (07:00 by default), end is
    start + shift length (8h by default). Elapsed time is clamped to
    [0, total] so a reading before the shift shows nothing elapsed and a
    reading after it shows the full shift elapsed.

    The tzinfo of now is carried onto start and end unchanged.
    """
    anchor_hour = settings.shift_anchor_hour if anchor_hour is None else anchor_hour
    length_hours = settings.shift_length_hours if length_hours is None else length_hours

    start = _at_hour(now, anchor_hour)
    end = start + timedelta(hours=length_hours)
    total = _minutes_between(start, end)

    elapsed = 0 if now < start else min(total, _minutes_between(start, now))
    remaining = max(0, total - elapsed)

    logger.debug("shift_window", elapsed_minutes=elapsed, remaining_minutes=remaining)

    return ShiftWindow(
        start=start,
        end=end,
        elapsed_minutes=elapsed,
        remaining_minutes=remaining,
        elapsed=format_duration(elapsed),
        remaining=format_duration(remaining),
        label=shift_label(start, end),
    )


def shift_completion(window: ShiftWindow) -> int:
    """Percentage of the shift already elapsed, rounded half up."""
    total = max(1, window.elapsed_minutes + window.remaining_minutes)
    return (window.elapsed_minutes * 200 + total) // (2 * total)


def rota_shift_start(now: datetime) -> datetime:
    """
    Start of the current shift on the 07:00 / 15:00 / 23:00 rota.

    Before 07:00 we are still in the night shift that began at 23:00 the
    previous day. From 23:00 onwards the night shift began today.

    Open question: the intake/output view used to treat 23:00-23:59 as part
    of the shift that began at 23:00 the previous day, which put a full day
    of records into "this shift". We take today's 23:00 instead; this is
    waiting on confirmation from the ward leads (see DESIGN.md, decision 2).
    """
    hour = now.hour
    if 7 <= hour < 15:
        return _at_hour(now, 7)
    if 15 <= hour < 23:
        return _at_hour(now, 15)
    if hour >= 23:
        return _at_hour(now, 23)
    return _at_hour(now - timedelta(days=1), 23)
