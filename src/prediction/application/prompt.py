import json
from typing import List

from ..domain import HalfHourAverage, HistoricalDataset, Site, SLOTS_PER_DAY

def _entries(records: List[HalfHourAverage]) -> str:
    return json.dumps(
        [
            {
                "halfHour": record.slot_index,
                "jamPercent": record.value,
                "date": record.timestamp.isoformat(),
            }
            for record in records
        ],
        indent=2,
    )

def build_analysis_request(site: Site, dataset: HistoricalDataset) -> str:
    """
    Renders site context and the three labeled historical groups as a single
    natural-language request for the predictor.
    """
    prior_years = dataset.same_day_prior_years.records
    recent = dataset.recent_days.records
    periodic = dataset.periodic.records

    return f"""
You are a traffic prediction AI system. Based on the historical traffic data provided below, predict traffic jam probability percentages for the next {SLOTS_PER_DAY} half-hour periods (next day from 00:00 to 23:30).

Site Information:
- Location: {site.location}
- Name: {site.name}
- Roads: {site.road1_name or "road 1"} / {site.road2_name or "road 2"}
- Data Format: jamPercent = jam congestion percentage (0-100%), averaged over both roads

Historical Data Analysis:
1. Same day previous years ({len(prior_years)} data points):
{_entries(prior_years)}

2. Last 7 days patterns ({len(recent)} data points):
{_entries(recent)}

3. Weekday and seasonal patterns ({len(periodic)} data points):
{_entries(periodic)}

Instructions:
- Return ONLY a JSON array of {SLOTS_PER_DAY} numbers (0-100) representing traffic jam probability percentages
- Index 0 = 00:00-00:30, Index 1 = 00:30-01:00, ..., Index 47 = 23:30-24:00
- Use historical jam percentages to predict future jam percentages
- Weight the last 7 days most heavily, then same weekday patterns, then previous years
- Consider patterns from historical data, typical rush hours, and location context
- Format: [10, 15, 8, 12, ..., 25] (exactly {SLOTS_PER_DAY} numbers)

Response format: [number, number, ..., number]"""
