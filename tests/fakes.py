from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple, Union

from src.common.exceptions import ConversionUnavailable

class FixedClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs):
        self.current += timedelta(**kwargs)

class ScriptedPredictor:
    """Returns canned responses in order (the last one repeats) and records prompts."""
    def __init__(self, *responses: Union[str, Exception, Callable[[str], str]]):
        self.responses = list(responses)
        self.prompts: List[str] = []

    def predict(self, prompt: str) -> str:
        self.prompts.append(prompt)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(prompt)
        return response

class SimpleLunarCalendar:
    """
    Deterministic lunar-like calendar: 354-day years of six 30/29-day month pairs,
    counted from 2000-01-01. Monotonic, so the equivalence search always converges.
    """
    EPOCH = date(2000, 1, 1)
    MONTH_LENGTHS = [30, 29] * 6

    def to_secondary(self, day: date) -> Tuple[int, int, int]:
        year, remainder = divmod((day - self.EPOCH).days, 354)
        for month, length in enumerate(self.MONTH_LENGTHS, start=1):
            if remainder < length:
                return year, month, remainder + 1
            remainder -= length
        raise AssertionError("unreachable")

    def from_secondary(self, year: int, month: int, day: int) -> date:
        offset = year * 354 + sum(self.MONTH_LENGTHS[:month - 1]) + day - 1
        return self.EPOCH + timedelta(days=offset)

class UnavailableCalendar:
    def to_secondary(self, day: date) -> Tuple[int, int, int]:
        raise ConversionUnavailable(f"no conversion for {day}")

def zero_forecast_text(overrides: Optional[dict] = None) -> str:
    values = [0] * 48
    for index, value in (overrides or {}).items():
        values[index] = value
    return "[" + ", ".join(str(v) for v in values) + "]"
