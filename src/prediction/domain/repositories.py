"""
Domain repositories for the Congestion Prediction module.
"""
from datetime import date, datetime
from typing import List, Optional, Protocol, Sequence
from .entities import Site, Reading, HalfHourAverage, PredictionRecord

class SiteRepository(Protocol):
    def list_sites(self) -> List[Site]:
        ...

    def get_site(self, site_id: str) -> Optional[Site]:
        ...

class ReadingRepository(Protocol):
    def readings_between(self, site_id: str, start: datetime, end: datetime) -> List[Reading]:
        """Readings with start <= timestamp < end."""
        ...

class HalfHourAverageRepository(Protocol):
    def append(self, records: Sequence[HalfHourAverage]) -> None:
        ...

    def replace_slots(self, site_id: str, day: date, records: Sequence[HalfHourAverage]) -> None:
        """Upsert by (site, day, slot): existing records for the given slots are replaced."""
        ...

    def for_day(self, site_id: str, day: date) -> List[HalfHourAverage]:
        ...

class PredictionStore(Protocol):
    """
    Append-only forecast store. get() returns the authoritative record or None.
    """
    def put(self, site_id: str, target_date: date, values: Sequence[int], generated_at: datetime) -> PredictionRecord:
        ...

    def get(self, site_id: str, target_date: date) -> Optional[PredictionRecord]:
        ...
