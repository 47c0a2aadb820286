"""
Application layer: aggregation, sampling, orchestration and read paths.
"""
from .aggregator import HalfHourAggregator, compute_half_hour_averages
from .calendar import CalendarEquivalenceResolver, find_secondary_equivalent
from .window_selector import HistoricalWindowSelector
from .orchestrator import PredictionOrchestrator, DailyBatchRunner
from .query import PredictionQueryService
from .response_parser import decode_prediction_response
from .prompt import build_analysis_request
