"""
Calendar-equivalent dates across the Gregorian and a secondary lunar calendar.

The secondary lookup is a bounded local search, not calendrical arithmetic:
starting one Gregorian year before the expected answer it walks one day at a
time towards the target (year, month, day), assuming the Gregorian -> secondary
mapping is monotonic over a short neighbourhood. Target days that do not exist
in the target year (e.g. day 30 of a 29-day month) never match and exhaust the
budget.
"""
import calendar as gregorian_calendar
from dataclasses import dataclass
from datetime import date, timedelta

from ..domain import SecondaryCalendar
from ...common.exceptions import ConversionUnavailable

DEFAULT_MAX_ITERATIONS = 400

def shift_years(day: date, years: int) -> date:
    """Same month and day `years` later (negative for earlier); Feb 29 becomes Feb 28."""
    year = day.year + years
    last_day = gregorian_calendar.monthrange(year, day.month)[1]
    return date(year, day.month, min(day.day, last_day))

def shift_months(day: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the end of the target month."""
    total = day.year * 12 + (day.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    last_day = gregorian_calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))

def find_secondary_equivalent(
    reference: date,
    years_back: int,
    secondary: SecondaryCalendar,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> date:
    """
    Gregorian date whose secondary (year, month, day) equals the reference's
    secondary date `years_back` secondary years earlier.

    Raises ConversionUnavailable when the budget is exhausted or a date cannot be converted.
    """
    if years_back < 1:
        raise ValueError("years_back must be >= 1")

    year, month, day = secondary.to_secondary(reference)
    target = (year - years_back, month, day)
    candidate = shift_years(reference, -(years_back + 1))

    for _ in range(max_iterations):
        current = tuple(secondary.to_secondary(candidate))
        if current == target:
            return candidate
        step = -1 if current > target else 1
        candidate += timedelta(days=step)

    raise ConversionUnavailable(
        f"No secondary equivalent of {reference.isoformat()} {years_back} year(s) back "
        f"within {max_iterations} iterations"
    )

@dataclass(frozen=True)
class CalendarEquivalence:
    gregorian: date
    secondary: date

class CalendarEquivalenceResolver:
    """
    Resolves the "same day" N years before a reference date in both calendars.
    """
    def __init__(self, secondary: SecondaryCalendar, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        self.secondary = secondary
        self.max_iterations = max_iterations

    def gregorian_equivalent(self, reference: date, years_back: int) -> date:
        return shift_years(reference, -years_back)

    def secondary_equivalent(self, reference: date, years_back: int) -> date:
        return find_secondary_equivalent(reference, years_back, self.secondary, self.max_iterations)

    def resolve(self, reference: date, years_back: int) -> CalendarEquivalence:
        return CalendarEquivalence(
            gregorian=self.gregorian_equivalent(reference, years_back),
            secondary=self.secondary_equivalent(reference, years_back),
        )
