from datetime import datetime
from zoneinfo import ZoneInfo

class SystemClock:
    """
    Wall clock in the reference time zone, returned naive to match stored timestamps.
    """
    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz).replace(tzinfo=None)
