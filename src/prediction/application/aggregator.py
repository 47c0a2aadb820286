import math
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List

from ..domain import (
    HalfHourAverage, Reading, ReadingRepository, HalfHourAverageRepository,
    day_bounds, slot_index, slot_start,
)
from ...common.logging import setup_logger

logger = setup_logger(__name__)

STRICT = "strict"
LENIENT = "lenient"

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

def compute_half_hour_averages(site_id: str, day: date, readings: Iterable[Reading]) -> List[HalfHourAverage]:
    """
    Buckets one day's readings into half-hour slots and averages each non-empty slot.
    Readings outside the day are ignored; empty slots produce no record.
    """
    start, end = day_bounds(day)
    buckets: Dict[int, List[float]] = defaultdict(list)

    for reading in readings:
        if not start <= reading.timestamp < end:
            continue
        buckets[slot_index(reading.timestamp)].append(reading.congestion)

    averages = []
    for index in sorted(buckets):
        values = buckets[index]
        mean = round_half_up(sum(values) / len(values))
        averages.append(HalfHourAverage(
            site_id=site_id,
            timestamp=slot_start(day, index),
            slot_index=index,
            value=max(0, min(100, mean)),
        ))
    return averages

class HalfHourAggregator:
    """
    Reduces a day's raw readings for one site into at most 48 slot averages and persists them.

    In strict mode a re-run for the same day replaces that day's slot records;
    in lenient mode it appends, so repeated runs accumulate duplicates.
    """
    def __init__(
        self,
        readings: ReadingRepository,
        averages: HalfHourAverageRepository,
        write_mode: str = STRICT,
    ):
        if write_mode not in (STRICT, LENIENT):
            raise ValueError(f"Unknown write mode: {write_mode}")
        self.readings = readings
        self.averages = averages
        self.write_mode = write_mode

    def aggregate_day(self, site_id: str, day: date) -> List[HalfHourAverage]:
        start, end = day_bounds(day)
        readings = self.readings.readings_between(site_id, start, end)
        records = compute_half_hour_averages(site_id, day, readings)

        if not records:
            logger.info(f"No readings for {site_id} on {day.isoformat()}, nothing to aggregate")
            return records

        if self.write_mode == STRICT:
            self.averages.replace_slots(site_id, day, records)
        else:
            self.averages.append(records)

        logger.info(
            f"Aggregated {len(readings)} readings into {len(records)} slots "
            f"for {site_id} on {day.isoformat()} ({self.write_mode})"
        )
        return records
