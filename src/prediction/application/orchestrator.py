from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import timedelta
from typing import Callable, List

from ..domain import (
    BatchReport, Clock, HistoricalDataset, Predictor, PredictionStore,
    Site, SiteRepository, SiteRunResult, SLOTS_PER_DAY,
)
from .aggregator import HalfHourAggregator
from .window_selector import HistoricalWindowSelector
from .prompt import build_analysis_request
from .response_parser import decode_prediction_response
from ...common.exceptions import SiteNotFound
from ...common.logging import setup_logger, log_execution_time

logger = setup_logger(__name__)

class PredictionOrchestrator:
    """
    Runs the per-site prediction pipeline:
    aggregate yesterday -> select history -> ask predictor -> decode -> store for tomorrow.

    Constructed per run with its collaborators injected; holds no per-site state.
    """
    def __init__(
        self,
        sites: SiteRepository,
        aggregator: HalfHourAggregator,
        selector: HistoricalWindowSelector,
        predictor: Predictor,
        store: PredictionStore,
        clock: Clock,
        prompt_builder: Callable[[Site, HistoricalDataset], str] = build_analysis_request,
    ):
        self.sites = sites
        self.aggregator = aggregator
        self.selector = selector
        self.predictor = predictor
        self.store = store
        self.clock = clock
        self.prompt_builder = prompt_builder

    @log_execution_time(logger)
    def run_for_site(self, site_id: str) -> SiteRunResult:
        """
        Full pipeline for one site. Predictor and storage failures propagate;
        a malformed response is stored as an all-zero forecast.
        """
        site = self.sites.get_site(site_id)
        if site is None:
            raise SiteNotFound(f"Unknown site: {site_id}")

        now = self.clock.now()
        today = now.date()
        self.aggregator.aggregate_day(site.site_id, today - timedelta(days=1))

        dataset = self.selector.select(site.site_id, now)
        prompt = self.prompt_builder(site, dataset)
        response = self.predictor.predict(prompt)

        decoded = decode_prediction_response(response)
        for warning in decoded.warnings:
            logger.warning(f"[{site.site_id}] {warning}")
        if decoded.ok:
            values = decoded.values
        else:
            logger.warning(f"[{site.site_id}] Malformed predictor response ({decoded.reason}), storing zero forecast")
            logger.debug(f"[{site.site_id}] Raw predictor response: {response!r}")
            values = [0] * SLOTS_PER_DAY

        record = self.store.put(site.site_id, today + timedelta(days=1), values, self.clock.now())
        logger.info(f"Stored prediction for {site.site_id} on {record.target_date.isoformat()}")
        return SiteRunResult(site_id=site.site_id, record=record, decode_ok=decoded.ok)

    def regenerate(self, site_id: str) -> SiteRunResult:
        """
        On-demand run of the same pipeline. Always appends a new record.
        """
        logger.info(f"Manual regeneration requested for {site_id}")
        return self.run_for_site(site_id)

class DailyBatchRunner:
    """
    Drives the per-site pipeline over every known site. A failing site is
    logged and reported; only failing to list the sites escapes.
    """
    def __init__(self, sites: SiteRepository, orchestrator: PredictionOrchestrator, clock: Clock, max_workers: int = 1):
        self.sites = sites
        self.orchestrator = orchestrator
        self.clock = clock
        self.max_workers = max_workers

    def _run_site(self, site_id: str) -> SiteRunResult:
        try:
            return self.orchestrator.run_for_site(site_id)
        except Exception as e:
            logger.error(f"Prediction failed for site {site_id}: {e}")
            return SiteRunResult(site_id=site_id, error=f"{type(e).__name__}: {e}")

    @log_execution_time(logger)
    def run(self) -> BatchReport:
        report = BatchReport(started_at=self.clock.now())
        site_ids: List[str] = [site.site_id for site in self.sites.list_sites()]
        logger.info(f"Processing predictions for {len(site_ids)} sites")

        if self.max_workers <= 1:
            for site_id in site_ids:
                report.results.append(self._run_site(site_id))
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._run_site, site_id) for site_id in site_ids]
                for future in as_completed(futures):
                    report.results.append(future.result())

        logger.info(
            f"Daily batch finished: {report.processed} processed, "
            f"{report.succeeded} succeeded, {report.failed} failed"
        )
        return report
