from .forecast import (
    SlotForecast, ForecastSummary, SiteForecast, ForecastLookup,
    SiteOverview, PredictionsOverview, RegenerationResult,
)

__all__ = [
    "SlotForecast",
    "ForecastSummary",
    "SiteForecast",
    "ForecastLookup",
    "SiteOverview",
    "PredictionsOverview",
    "RegenerationResult",
]
