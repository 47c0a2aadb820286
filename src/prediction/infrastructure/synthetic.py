"""
Synthetic half-hour history for demos and manual testing.
"""
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

import numpy as np

from ..domain import HalfHourAverage, SLOTS_PER_DAY, slot_start

@dataclass(frozen=True)
class TrafficPattern:
    base_jam_percent: float
    variance: float

# Realistic jam percentages per period of the day
TRAFFIC_PATTERNS = {
    "morning_rush": TrafficPattern(75, 15),
    "evening_rush": TrafficPattern(80, 20),
    "business_hours": TrafficPattern(45, 20),
    "evening": TrafficPattern(35, 15),
    "early_morning": TrafficPattern(15, 10),
    "late_night": TrafficPattern(5, 8),
    "weekend_day": TrafficPattern(25, 15),
    "weekend_night": TrafficPattern(10, 8),
}

def pattern_for(hour: int, is_weekend: bool) -> TrafficPattern:
    if is_weekend:
        return TRAFFIC_PATTERNS["weekend_night" if hour >= 22 or hour <= 6 else "weekend_day"]
    if 7 <= hour <= 9:
        return TRAFFIC_PATTERNS["morning_rush"]
    if 17 <= hour <= 19:
        return TRAFFIC_PATTERNS["evening_rush"]
    if 10 <= hour <= 16:
        return TRAFFIC_PATTERNS["business_hours"]
    if 20 <= hour <= 21:
        return TRAFFIC_PATTERNS["evening"]
    if hour == 6:
        return TRAFFIC_PATTERNS["early_morning"]
    return TRAFFIC_PATTERNS["late_night"]

def generate_day(site_id: str, day: date, rng: np.random.Generator) -> List[HalfHourAverage]:
    is_weekend = day.weekday() >= 5
    # Occasional rain, holiday or special event changes the whole day
    modifier = rng.choice([1.0, 1.3, 0.3, 1.5], p=[0.82, 0.10, 0.05, 0.03])

    records = []
    for index in range(SLOTS_PER_DAY):
        pattern = pattern_for(index // 2, is_weekend)
        noise = (rng.random() - 0.5) * pattern.variance
        value = int(np.clip(round(pattern.base_jam_percent * modifier + noise), 0, 100))
        records.append(HalfHourAverage(
            site_id=site_id,
            timestamp=slot_start(day, index),
            slot_index=index,
            value=value,
        ))
    return records

def generate_synthetic_history(site_id: str, days: Iterable[date], seed: Optional[int] = None) -> List[HalfHourAverage]:
    rng = np.random.default_rng(seed)
    records = []
    for day in sorted(set(days)):
        records.extend(generate_day(site_id, day, rng))
    return records
