"""
Half-hour slot arithmetic. A calendar day is [00:00, next day 00:00) in the
reference time zone; slot n covers minutes [30n, 30n + 30).
"""
from datetime import date, datetime, time, timedelta
from typing import Tuple

SLOTS_PER_DAY = 48
SLOT_MINUTES = 30

def slot_index(timestamp: datetime) -> int:
    minute_of_day = timestamp.hour * 60 + timestamp.minute
    return minute_of_day // SLOT_MINUTES

def slot_start(day: date, index: int) -> datetime:
    if not 0 <= index < SLOTS_PER_DAY:
        raise ValueError(f"slot index out of range: {index}")
    return datetime.combine(day, time()) + timedelta(minutes=index * SLOT_MINUTES)

def slot_label(index: int) -> str:
    """'HH:MM' start time of a slot."""
    if not 0 <= index < SLOTS_PER_DAY:
        raise ValueError(f"slot index out of range: {index}")
    hours, minutes = divmod(index * SLOT_MINUTES, 60)
    return f"{hours:02d}:{minutes:02d}"

def day_bounds(day: date) -> Tuple[datetime, datetime]:
    start = datetime.combine(day, time())
    return start, start + timedelta(days=1)
