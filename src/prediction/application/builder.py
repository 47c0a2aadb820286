import os
from typing import Dict, Optional

from omegaconf import DictConfig

from ..domain import Clock, Predictor
from ..infrastructure import (
    HijriCalendar,
    SQLAlchemyHalfHourAverageRepository,
    SQLAlchemyPredictionStore,
    SQLAlchemyReadingRepository,
    SQLAlchemySiteRepository,
    SystemClock,
)
from .aggregator import HalfHourAggregator
from .calendar import CalendarEquivalenceResolver
from .window_selector import HistoricalWindowSelector
from .orchestrator import DailyBatchRunner, PredictionOrchestrator
from .query import PredictionQueryService
from ...common.database import create_db_engine, create_session_factory, init_db
from ...common.exceptions import ConfigurationError
from ...common.logging import setup_logger

logger = setup_logger(__name__)

class PredictionApplicationBuilder:
    """
    Builder pattern for constructing the prediction application.
    Centralizes component instantiation and wiring from configuration.
    """

    def __init__(self, config: DictConfig, clock: Optional[Clock] = None, predictor: Optional[Predictor] = None):
        self.config = config
        self.clock: Clock = clock or SystemClock(config.timezone)
        self.predictor: Optional[Predictor] = predictor

        # Components
        self.engine = None
        self.session_factory = None
        self.sites: Optional[SQLAlchemySiteRepository] = None
        self.readings: Optional[SQLAlchemyReadingRepository] = None
        self.averages: Optional[SQLAlchemyHalfHourAverageRepository] = None
        self.store: Optional[SQLAlchemyPredictionStore] = None
        self.selector: Optional[HistoricalWindowSelector] = None

    def build_database(self, create_tables: bool = True) -> 'PredictionApplicationBuilder':
        logger.info(f"Connecting to database: {self.config.database.url}")
        self.engine = create_db_engine(self.config.database.url, echo=self.config.database.echo)
        if create_tables:
            init_db(self.engine)
        self.session_factory = create_session_factory(self.engine)
        return self

    def build_repositories(self) -> 'PredictionApplicationBuilder':
        if self.session_factory is None:
            self.build_database()
        self.sites = SQLAlchemySiteRepository(self.session_factory)
        self.readings = SQLAlchemyReadingRepository(self.session_factory)
        self.averages = SQLAlchemyHalfHourAverageRepository(self.session_factory)
        self.store = SQLAlchemyPredictionStore(self.session_factory)
        return self

    def build_predictor(self) -> 'PredictionApplicationBuilder':
        if self.predictor is not None:
            return self
        predictor_cfg = self.config.predictor
        api_key = os.getenv(predictor_cfg.api_key_env)
        if not api_key:
            raise ConfigurationError(f"{predictor_cfg.api_key_env} is not configured")

        from ..infrastructure.llm_predictor import OpenAICompatiblePredictor
        self.predictor = OpenAICompatiblePredictor(
            model=predictor_cfg.model,
            api_key=api_key,
            base_url=predictor_cfg.base_url,
            timeout_seconds=predictor_cfg.timeout_seconds,
            temperature=predictor_cfg.temperature,
            max_retries=predictor_cfg.max_retries,
        )
        return self

    def build_selector(self) -> 'PredictionApplicationBuilder':
        if self.averages is None:
            self.build_repositories()
        resolver = CalendarEquivalenceResolver(
            HijriCalendar(), max_iterations=self.config.calendar.max_iterations
        )
        self.selector = HistoricalWindowSelector(
            self.averages,
            resolver,
            fallback_offset_days=self.config.sampling.fallback_offset_days,
            seed=self.config.sampling.seed,
        )
        return self

    def build_orchestrator(self) -> PredictionOrchestrator:
        if self.sites is None:
            self.build_repositories()
        if self.selector is None:
            self.build_selector()
        self.build_predictor()

        aggregator = HalfHourAggregator(
            self.readings, self.averages, write_mode=self.config.aggregation.write_mode
        )
        return PredictionOrchestrator(
            sites=self.sites,
            aggregator=aggregator,
            selector=self.selector,
            predictor=self.predictor,
            store=self.store,
            clock=self.clock,
        )

    def build_batch_runner(self) -> DailyBatchRunner:
        orchestrator = self.build_orchestrator()
        return DailyBatchRunner(
            self.sites, orchestrator, self.clock, max_workers=self.config.batch.max_workers
        )

    def build_query_service(self) -> PredictionQueryService:
        if self.sites is None:
            self.build_repositories()
        return PredictionQueryService(self.sites, self.store, self.clock)

    def get_components(self) -> Dict:
        """Returns built components for external use (e.g. seeding, inspection)"""
        return {
            'engine': self.engine,
            'sites': self.sites,
            'readings': self.readings,
            'averages': self.averages,
            'store': self.store,
            'selector': self.selector,
            'predictor': self.predictor,
            'clock': self.clock,
        }
