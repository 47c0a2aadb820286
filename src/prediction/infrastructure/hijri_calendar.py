from datetime import date
from typing import Tuple

from hijridate import Gregorian

from ...common.exceptions import ConversionUnavailable

class HijriCalendar:
    """
    Umm al-Qura Hijri calendar via hijridate. Supported range is roughly
    1924-2077 CE; dates outside it raise ConversionUnavailable.
    """
    def to_secondary(self, day: date) -> Tuple[int, int, int]:
        try:
            return Gregorian(day.year, day.month, day.day).to_hijri().datetuple()
        except (OverflowError, ValueError) as e:
            raise ConversionUnavailable(f"Cannot convert {day.isoformat()} to Hijri: {e}") from e
