import random
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from ..domain import (
    HalfHourAverageRepository, HistoricalDataset, HistoricalGroup,
    SampleRationale, SampledDay,
)
from .calendar import CalendarEquivalenceResolver, shift_months
from ...common.exceptions import ConversionUnavailable
from ...common.logging import setup_logger

logger = setup_logger(__name__)

@dataclass(frozen=True)
class PlannedDay:
    day: date
    label: str

@dataclass(frozen=True)
class SamplingPlan:
    same_day_prior_years: List[PlannedDay]
    recent_days: List[PlannedDay]
    periodic: List[PlannedDay]

class HistoricalWindowSelector:
    """
    Builds the 21-day historical dataset for a site:

    - same day in each of the last 3 years, Gregorian and secondary calendar (6 days)
    - the 7 calendar days before today (7 days)
    - same weekday of the last 4 weeks, the 15th of the last 2 months and
      2 background days from a window about six months back (8 days)

    Days with no averages contribute nothing; the selector never fabricates data.
    """
    PRIOR_YEARS = 3
    RECENT_DAYS = 7
    WEEKDAY_WEEKS = 4
    MID_MONTH_MONTHS = 2
    MID_MONTH_DAY = 15
    BACKGROUND_MONTHS_BACK = 6
    BACKGROUND_SPAN_DAYS = 30
    BACKGROUND_DAYS = 2

    def __init__(
        self,
        averages: HalfHourAverageRepository,
        resolver: CalendarEquivalenceResolver,
        fallback_offset_days: int = 15,
        seed: Optional[int] = None,
    ):
        self.averages = averages
        self.resolver = resolver
        self.fallback_offset_days = fallback_offset_days
        self.seed = seed

    def _rng_for(self, site_id: str, today: date) -> random.Random:
        """Live randomness without a seed; otherwise one generator per (seed, site, day)."""
        if self.seed is None:
            return random.Random()
        return random.Random(f"{self.seed}:{site_id}:{today.isoformat()}")

    def plan(self, site_id: str, today: date) -> SamplingPlan:
        return SamplingPlan(
            same_day_prior_years=self._plan_prior_years(today),
            recent_days=self._plan_recent(today),
            periodic=self._plan_periodic(today, self._rng_for(site_id, today)),
        )

    def select(self, site_id: str, now: datetime) -> HistoricalDataset:
        plan = self.plan(site_id, now.date())
        dataset = HistoricalDataset(
            site_id=site_id,
            same_day_prior_years=self._fill(site_id, SampleRationale.SAME_DAY_PRIOR_YEAR, plan.same_day_prior_years),
            recent_days=self._fill(site_id, SampleRationale.RECENT_DAY, plan.recent_days),
            periodic=self._fill(site_id, SampleRationale.PERIODIC, plan.periodic),
        )
        logger.info(f"Selected {dataset.total_records} historical records for {site_id}")
        return dataset

    def _fill(self, site_id: str, rationale: SampleRationale, planned: List[PlannedDay]) -> HistoricalGroup:
        days = []
        for entry in planned:
            records = self.averages.for_day(site_id, entry.day)
            if not records:
                logger.debug(f"No averages for {site_id} on {entry.day.isoformat()} ({entry.label})")
            days.append(SampledDay(day=entry.day, label=entry.label, records=records))
        return HistoricalGroup(rationale=rationale, days=days)

    def _plan_prior_years(self, today: date) -> List[PlannedDay]:
        planned = []
        for years in range(1, self.PRIOR_YEARS + 1):
            gregorian = self.resolver.gregorian_equivalent(today, years)
            planned.append(PlannedDay(gregorian, f"gregorian_same_day_{years}_years_ago"))
            try:
                secondary = self.resolver.secondary_equivalent(today, years)
                planned.append(PlannedDay(secondary, f"secondary_equivalent_{years}_years_ago"))
            except ConversionUnavailable as e:
                fallback = gregorian + timedelta(days=self.fallback_offset_days)
                logger.warning(f"Secondary calendar lookup failed ({e}), using {fallback.isoformat()}")
                planned.append(PlannedDay(fallback, f"gregorian_offset_{years}_years_ago"))
        return planned

    def _plan_recent(self, today: date) -> List[PlannedDay]:
        return [
            PlannedDay(today - timedelta(days=days), f"last_{days}_days")
            for days in range(1, self.RECENT_DAYS + 1)
        ]

    def _plan_periodic(self, today: date, rng: random.Random) -> List[PlannedDay]:
        planned = [
            PlannedDay(today - timedelta(weeks=weeks), f"same_weekday_{weeks}_weeks_ago")
            for weeks in range(1, self.WEEKDAY_WEEKS + 1)
        ]
        for months in range(1, self.MID_MONTH_MONTHS + 1):
            mid_month = shift_months(today, -months).replace(day=self.MID_MONTH_DAY)
            planned.append(PlannedDay(mid_month, f"mid_month_{months}_months_ago"))

        window_start = shift_months(today, -self.BACKGROUND_MONTHS_BACK)
        for index in range(self.BACKGROUND_DAYS):
            offset = index * self.BACKGROUND_SPAN_DAYS + rng.randrange(self.BACKGROUND_SPAN_DAYS)
            planned.append(PlannedDay(window_start + timedelta(days=offset), f"background_day_{index + 1}"))
        return planned
