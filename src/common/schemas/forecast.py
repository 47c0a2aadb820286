from datetime import date, datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

class SlotForecast(BaseModel):
    """
    Forecast congestion probability for one half-hour slot.
    """
    half_hour_index: int = Field(..., ge=0, le=47, description="Slot index (0 = 00:00-00:30)")
    time_slot: str = Field(..., pattern=r"^\d{2}:\d{2}$", description="Slot start time HH:MM")
    jam_probability_percent: int = Field(..., ge=0, le=100, description="Jam probability (0-100)")

class ForecastSummary(BaseModel):
    total_half_hours: int = Field(..., description="Number of slots in the forecast")
    average_jam_probability: int = Field(..., ge=0, le=100, description="Rounded mean probability")
    peak_jam_periods: List[SlotForecast] = Field(
        default_factory=list, description="Up to 5 slots above 70%, highest first"
    )

class SiteForecast(BaseModel):
    """
    Retrieval payload for one site and target date.
    """
    site_id: str
    site_name: str
    location: str
    prediction_date: date
    generated_at: datetime
    predictions: List[SlotForecast]
    summary: ForecastSummary

    @field_validator('predictions')
    def must_cover_every_slot(cls, v):
        if len(v) != 48:
            raise ValueError('predictions must contain exactly 48 slots')
        return v

class ForecastLookup(BaseModel):
    """
    Outcome of a retrieval request. `detail` is safe to show to untrusted callers.
    """
    status: Literal["found", "not_found", "invalid_stored_data", "site_unknown"]
    detail: str = ""
    forecast: Optional[SiteForecast] = None

class SiteOverview(BaseModel):
    site_id: str
    site_name: str
    location: str
    has_predictions: bool
    average_jam_probability: int = Field(0, ge=0, le=100)
    max_jam_probability: int = Field(0, ge=0, le=100)
    last_seen: Optional[datetime] = None
    error: Optional[str] = None

class PredictionsOverview(BaseModel):
    prediction_date: date
    sites: List[SiteOverview] = Field(default_factory=list)
    total_sites: int = 0
    sites_with_predictions: int = 0
    prediction_coverage: int = Field(0, ge=0, le=100, description="Rounded percent of sites with a forecast")

class RegenerationResult(BaseModel):
    site_id: str
    target_date: date
    predictions_generated: int
    average_jam_probability: int = Field(..., ge=0, le=100)
    decode_ok: bool
