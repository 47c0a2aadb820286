"""
Domain protocols for the collaborators of the prediction pipeline.
"""
from datetime import date, datetime
from typing import Protocol, Tuple

class Clock(Protocol):
    """
    Source of "now" as a naive datetime in the reference time zone.
    """
    def now(self) -> datetime:
        ...

class SecondaryCalendar(Protocol):
    """
    Converts a Gregorian date to (year, month, day) in a lunar calendar.
    Raises ConversionUnavailable when the date cannot be converted.
    """
    def to_secondary(self, day: date) -> Tuple[int, int, int]:
        ...

class Predictor(Protocol):
    """
    External prediction oracle: text in, free text out.
    Raises PredictorUnreachable or PredictorTimeout.
    """
    def predict(self, prompt: str) -> str:
        ...
