"""
Domain entities for the Congestion Prediction module.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple

@dataclass(frozen=True)
class Site:
    """
    A monitored site. Owned by the device registry; used here as prompt context.
    """
    site_id: str
    name: str
    location: str
    road1_name: str = ""
    road2_name: str = ""
    last_seen_at: Optional[datetime] = None

@dataclass(frozen=True)
class Reading:
    """
    Two co-located congestion measurements (e.g. both directions of a road).
    """
    site_id: str
    value1: int
    value2: int
    timestamp: datetime

    @property
    def congestion(self) -> float:
        return (self.value1 + self.value2) / 2

@dataclass
class HalfHourAverage:
    """
    Mean congestion of one site over one half-hour slot of one calendar day.
    """
    site_id: str
    timestamp: datetime  # start of the slot
    slot_index: int  # 0-47
    value: int  # 0-100
    id: Optional[int] = None

class SampleRationale(str, Enum):
    SAME_DAY_PRIOR_YEAR = "same_day_prior_year"
    RECENT_DAY = "recent_day"
    PERIODIC = "periodic"

@dataclass
class SampledDay:
    """
    One calendar day chosen by the window policy and whatever averages exist for it.
    """
    day: date
    label: str
    records: List[HalfHourAverage] = field(default_factory=list)

@dataclass
class HistoricalGroup:
    rationale: SampleRationale
    days: List[SampledDay] = field(default_factory=list)

    @property
    def records(self) -> List[HalfHourAverage]:
        return [record for sampled in self.days for record in sampled.records]

@dataclass
class HistoricalDataset:
    """
    Transient training window handed to the predictor, groups kept separate.
    """
    site_id: str
    same_day_prior_years: HistoricalGroup
    recent_days: HistoricalGroup
    periodic: HistoricalGroup

    @property
    def groups(self) -> Tuple[HistoricalGroup, HistoricalGroup, HistoricalGroup]:
        return (self.same_day_prior_years, self.recent_days, self.periodic)

    @property
    def total_records(self) -> int:
        return sum(len(group.records) for group in self.groups)

@dataclass(frozen=True)
class PredictionRecord:
    """
    One generated 48-slot forecast. The latest one per (site, date) is authoritative.
    """
    site_id: str
    target_date: date
    values: List[int]
    generated_at: datetime
    id: Optional[int] = None

@dataclass(frozen=True)
class DecodeResult:
    """
    Outcome of decoding predictor text: 48 values, or the reason decoding failed.
    """
    values: Optional[List[int]] = None
    reason: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.values is not None

    @classmethod
    def success(cls, values: List[int], warnings: Tuple[str, ...] = ()) -> "DecodeResult":
        return cls(values=values, warnings=warnings)

    @classmethod
    def failure(cls, reason: str) -> "DecodeResult":
        return cls(reason=reason)

@dataclass
class SiteRunResult:
    """
    Result of one per-site pipeline run.
    """
    site_id: str
    record: Optional[PredictionRecord] = None
    decode_ok: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.record is not None

@dataclass
class BatchReport:
    started_at: datetime
    results: List[SiteRunResult] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed(self) -> int:
        return self.processed - self.succeeded
