import pytest
from datetime import date, datetime
from src.common.database.models import PredictionDB
from src.prediction.application.query import PredictionQueryService, average_probability, summarize
from src.prediction.domain import Site

TARGET = date(2026, 10, 19)

@pytest.fixture
def service(site_repo, store, clock):
    return PredictionQueryService(site_repo, store, clock)

def values_with(overrides, base=0):
    values = [base] * 48
    for index, value in overrides.items():
        values[index] = value
    return values

def test_average_rounds_half_up():
    assert average_probability([50] * 47 + [74]) == 51
    assert average_probability([0] * 24 + [1] * 24) == 1
    assert average_probability([]) == 0

def test_peaks_are_strictly_above_threshold_sorted_and_capped():
    values = values_with({3: 70, 10: 71, 11: 95, 12: 95, 20: 80, 21: 85, 22: 90, 30: 75})
    summary = summarize(values)

    assert summary.total_half_hours == 48
    assert [slot.half_hour_index for slot in summary.peak_jam_periods] == [11, 12, 22, 21, 20]
    assert summary.peak_jam_periods[0].time_slot == "05:30"

def test_no_peaks_when_nothing_exceeds_threshold():
    assert summarize([70] * 48).peak_jam_periods == []

def test_found_forecast_has_48_labelled_slots(site, store, service):
    generated_at = datetime(2026, 10, 18, 2, 0)
    store.put("S1", TARGET, values_with({16: 85}, base=20), generated_at)

    lookup = service.get_forecast("S1", TARGET)

    assert lookup.status == "found"
    forecast = lookup.forecast
    assert forecast.site_name == "Main St Sensor"
    assert forecast.location == "Main St & 5th Ave"
    assert forecast.generated_at == generated_at
    assert len(forecast.predictions) == 48
    assert forecast.predictions[16].time_slot == "08:00"
    assert forecast.predictions[16].jam_probability_percent == 85
    assert forecast.summary.average_jam_probability == 21
    assert [slot.half_hour_index for slot in forecast.summary.peak_jam_periods] == [16]

def test_default_date_is_today(site, store, service):
    store.put("S1", date(2026, 10, 18), values_with({}), datetime(2026, 10, 17, 2, 0))
    assert service.get_forecast("S1").status == "found"

def test_missing_forecast_is_not_found(site, service):
    lookup = service.get_forecast("S1", TARGET)
    assert lookup.status == "not_found"
    assert lookup.forecast is None
    assert "2026-10-19" in lookup.detail

def test_unknown_site(service):
    lookup = service.get_forecast("ghost", TARGET)
    assert lookup.status == "site_unknown"

def test_corrupt_stored_values_are_reported_without_internals(site, session_factory, service):
    with session_factory() as session:
        session.add(PredictionDB(
            site_id="S1", prediction_date=TARGET, predicted_values="{not json",
            generated_at=datetime(2026, 10, 18, 2, 0),
        ))
        session.commit()

    lookup = service.get_forecast("S1", TARGET)

    assert lookup.status == "invalid_stored_data"
    assert lookup.detail == "Stored predictions have an invalid format."
    assert lookup.forecast is None

def test_overview_coverage(site, site_repo, store, service):
    site_repo.add(Site(site_id="S2", name="Second", location="Elm St"))
    site_repo.add(Site(site_id="S3", name="Third", location="Oak St"))
    store.put("S1", TARGET, values_with({0: 90}, base=10), datetime(2026, 10, 18, 2, 0))

    overview = service.overview(TARGET)

    assert overview.total_sites == 3
    assert overview.sites_with_predictions == 1
    assert overview.prediction_coverage == 33
    first = overview.sites[0]
    assert first.has_predictions
    assert first.max_jam_probability == 90
    assert first.average_jam_probability == 12
    assert not overview.sites[1].has_predictions

def test_overview_marks_unreadable_sites(site, session_factory, service):
    with session_factory() as session:
        session.add(PredictionDB(
            site_id="S1", prediction_date=TARGET, predicted_values="[1, 2]",
            generated_at=datetime(2026, 10, 18, 2, 0),
        ))
        session.commit()

    overview = service.overview(TARGET)

    assert overview.sites[0].error == "Failed to load predictions"
    assert not overview.sites[0].has_predictions
    assert overview.prediction_coverage == 0

def test_overview_with_no_sites(service):
    overview = service.overview(TARGET)
    assert overview.total_sites == 0
    assert overview.prediction_coverage == 0
