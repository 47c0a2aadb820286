"""
Domain module initialization.
"""
from .entities import (
    Site,
    Reading,
    HalfHourAverage,
    SampleRationale,
    SampledDay,
    HistoricalGroup,
    HistoricalDataset,
    PredictionRecord,
    DecodeResult,
    SiteRunResult,
    BatchReport,
)
from .protocols import Clock, SecondaryCalendar, Predictor
from .repositories import (
    SiteRepository,
    ReadingRepository,
    HalfHourAverageRepository,
    PredictionStore,
)
from .time_slots import SLOTS_PER_DAY, SLOT_MINUTES, slot_index, slot_start, slot_label, day_bounds
