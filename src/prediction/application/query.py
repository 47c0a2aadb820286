from datetime import date
from typing import List, Optional, Sequence

from ..domain import Clock, PredictionRecord, PredictionStore, Site, SiteRepository, SiteRunResult, slot_label
from .aggregator import round_half_up
from ...common.exceptions import InvalidStoredPrediction
from ...common.logging import setup_logger
from ...common.schemas.forecast import (
    ForecastLookup, ForecastSummary, PredictionsOverview, RegenerationResult,
    SiteForecast, SiteOverview, SlotForecast,
)

logger = setup_logger(__name__)

PEAK_THRESHOLD = 70
MAX_PEAK_PERIODS = 5

def average_probability(values: Sequence[int]) -> int:
    return round_half_up(sum(values) / len(values)) if values else 0

def to_slots(values: Sequence[int]) -> List[SlotForecast]:
    return [
        SlotForecast(half_hour_index=index, time_slot=slot_label(index), jam_probability_percent=value)
        for index, value in enumerate(values)
    ]

def summarize(values: Sequence[int]) -> ForecastSummary:
    slots = to_slots(values)
    peaks = sorted(
        (slot for slot in slots if slot.jam_probability_percent > PEAK_THRESHOLD),
        key=lambda slot: (-slot.jam_probability_percent, slot.half_hour_index),
    )
    return ForecastSummary(
        total_half_hours=len(slots),
        average_jam_probability=average_probability(values),
        peak_jam_periods=peaks[:MAX_PEAK_PERIODS],
    )

def to_regeneration_result(result: SiteRunResult) -> RegenerationResult:
    record = result.record
    return RegenerationResult(
        site_id=result.site_id,
        target_date=record.target_date,
        predictions_generated=len(record.values),
        average_jam_probability=average_probability(record.values),
        decode_ok=result.decode_ok,
    )

class PredictionQueryService:
    """
    Read path for consumers. Distinguishes unknown sites, missing forecasts and
    unreadable stored data without exposing internal errors.
    """
    def __init__(self, sites: SiteRepository, store: PredictionStore, clock: Clock):
        self.sites = sites
        self.store = store
        self.clock = clock

    def _default_date(self, target_date: Optional[date]) -> date:
        return target_date or self.clock.now().date()

    def build_site_forecast(self, site: Site, record: PredictionRecord) -> SiteForecast:
        return SiteForecast(
            site_id=site.site_id,
            site_name=site.name,
            location=site.location,
            prediction_date=record.target_date,
            generated_at=record.generated_at,
            predictions=to_slots(record.values),
            summary=summarize(record.values),
        )

    def get_forecast(self, site_id: str, target_date: Optional[date] = None) -> ForecastLookup:
        target_date = self._default_date(target_date)
        site = self.sites.get_site(site_id)
        if site is None:
            return ForecastLookup(status="site_unknown", detail=f"No site found with ID: {site_id}")

        try:
            record = self.store.get(site_id, target_date)
        except InvalidStoredPrediction as e:
            logger.error(f"Invalid stored prediction for {site_id} on {target_date.isoformat()}: {e}")
            return ForecastLookup(
                status="invalid_stored_data",
                detail="Stored predictions have an invalid format.",
            )

        if record is None:
            return ForecastLookup(
                status="not_found",
                detail=f"No predictions found for site {site_id} for {target_date.isoformat()}. "
                       "Predictions are generated daily.",
            )
        return ForecastLookup(status="found", forecast=self.build_site_forecast(site, record))

    def overview(self, target_date: Optional[date] = None) -> PredictionsOverview:
        target_date = self._default_date(target_date)
        sites = self.sites.list_sites()
        entries = []

        for site in sites:
            entry = SiteOverview(
                site_id=site.site_id,
                site_name=site.name,
                location=site.location,
                has_predictions=False,
                last_seen=site.last_seen_at,
            )
            try:
                record = self.store.get(site.site_id, target_date)
            except InvalidStoredPrediction as e:
                logger.error(f"Invalid stored prediction for {site.site_id}: {e}")
                entry.error = "Failed to load predictions"
                record = None
            if record is not None:
                entry.has_predictions = True
                entry.average_jam_probability = average_probability(record.values)
                entry.max_jam_probability = max(record.values)
            entries.append(entry)

        with_predictions = sum(1 for entry in entries if entry.has_predictions)
        coverage = round_half_up(with_predictions * 100 / len(entries)) if entries else 0
        return PredictionsOverview(
            prediction_date=target_date,
            sites=entries,
            total_sites=len(entries),
            sites_with_predictions=with_predictions,
            prediction_coverage=coverage,
        )
