from .repositories import (
    SQLAlchemySiteRepository,
    SQLAlchemyReadingRepository,
    SQLAlchemyHalfHourAverageRepository,
    SQLAlchemyPredictionStore,
)
from .clock import SystemClock
from .hijri_calendar import HijriCalendar
from .synthetic import generate_synthetic_history
