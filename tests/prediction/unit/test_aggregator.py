import pytest
from datetime import date, datetime, timedelta
from unittest.mock import MagicMock
from src.prediction.application.aggregator import (
    HalfHourAggregator, compute_half_hour_averages, round_half_up,
)
from src.prediction.domain import Reading

DAY = date(2026, 10, 17)

def reading(hour, minute, v1, v2, day=DAY, second=0):
    return Reading(site_id="S1", value1=v1, value2=v2, timestamp=datetime(day.year, day.month, day.day, hour, minute, second))

def test_round_half_up():
    assert round_half_up(50.5) == 51
    assert round_half_up(50.49) == 50
    assert round_half_up(0.5) == 1

def test_readings_are_averaged_per_reading_then_per_slot():
    readings = [
        reading(7, 0, 80, 60),   # 70
        reading(7, 10, 90, 90),  # 90
        reading(7, 29, 40, 60),  # 50
    ]
    records = compute_half_hour_averages("S1", DAY, readings)

    assert len(records) == 1
    assert records[0].slot_index == 14
    assert records[0].value == 70
    assert records[0].timestamp == datetime(2026, 10, 17, 7, 0)

def test_minute_29_and_minute_30_split_into_two_slots():
    records = compute_half_hour_averages("S1", DAY, [reading(7, 29, 10, 10), reading(7, 30, 90, 90)])
    assert [(r.slot_index, r.value) for r in records] == [(14, 10), (15, 90)]

def test_half_values_round_up():
    records = compute_half_hour_averages("S1", DAY, [reading(0, 0, 50, 51)])
    assert records[0].value == 51

def test_readings_outside_the_day_are_ignored():
    readings = [
        reading(23, 59, 100, 100, day=DAY - timedelta(days=1)),
        reading(23, 59, 20, 20, second=59),
        reading(0, 0, 100, 100, day=DAY + timedelta(days=1)),
    ]
    records = compute_half_hour_averages("S1", DAY, readings)
    assert [(r.slot_index, r.value) for r in records] == [(47, 20)]

def test_slot_count_and_values_are_bounded():
    readings = [
        reading(hour, minute, (hour * 7) % 101, (minute * 3) % 101)
        for hour in range(24) for minute in range(0, 60, 5)
    ]
    records = compute_half_hour_averages("S1", DAY, readings)
    assert len(records) == 48
    assert all(0 <= r.value <= 100 for r in records)
    assert len({r.slot_index for r in records}) == 48

def test_empty_day_yields_no_records_and_no_writes():
    readings_repo = MagicMock()
    readings_repo.readings_between.return_value = []
    averages_repo = MagicMock()

    records = HalfHourAggregator(readings_repo, averages_repo).aggregate_day("S1", DAY)

    assert records == []
    averages_repo.replace_slots.assert_not_called()
    averages_repo.append.assert_not_called()

def test_aggregator_queries_the_day_bounds():
    readings_repo = MagicMock()
    readings_repo.readings_between.return_value = [reading(8, 0, 60, 80)]
    averages_repo = MagicMock()

    HalfHourAggregator(readings_repo, averages_repo).aggregate_day("S1", DAY)

    readings_repo.readings_between.assert_called_once_with(
        "S1", datetime(2026, 10, 17), datetime(2026, 10, 18)
    )
    averages_repo.replace_slots.assert_called_once()

def test_lenient_mode_appends():
    readings_repo = MagicMock()
    readings_repo.readings_between.return_value = [reading(8, 0, 60, 80)]
    averages_repo = MagicMock()

    HalfHourAggregator(readings_repo, averages_repo, write_mode="lenient").aggregate_day("S1", DAY)

    averages_repo.append.assert_called_once()
    averages_repo.replace_slots.assert_not_called()

def test_unknown_write_mode_is_rejected():
    with pytest.raises(ValueError):
        HalfHourAggregator(MagicMock(), MagicMock(), write_mode="sometimes")
