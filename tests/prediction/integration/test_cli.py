import json
import pytest
from datetime import date, datetime
from pathlib import Path
from src.common.config import ConfigManager
from src.common.exceptions import PredictorUnreachable
from src.prediction.application.builder import PredictionApplicationBuilder
from src.prediction.domain import Site
from src.prediction.presentation.cli import (
    EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_OK, build_parser, main, run_command,
)
from tests.fakes import FixedClock, ScriptedPredictor, zero_forecast_text

CONF_DIR = Path(__file__).resolve().parents[3] / "conf"

@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return ConfigManager(CONF_DIR).load_prediction_config(
        overrides=[f"database.url=sqlite:///{tmp_path / 'forecast.db'}", "sampling.seed=3"]
    )

@pytest.fixture
def make_builder(config):
    def _make(*responses):
        predictor = ScriptedPredictor(*responses) if responses else None
        return PredictionApplicationBuilder(
            config, clock=FixedClock(datetime(2026, 10, 18, 2, 0)), predictor=predictor
        )
    return _make

def add_site(builder, site_id="S1"):
    builder.build_repositories()
    builder.sites.add(Site(site_id=site_id, name="Main St Sensor", location="Main St & 5th Ave"))

def run(builder, *argv):
    return run_command(build_parser().parse_args(list(argv)), builder)

def test_init_db_creates_database_file(make_builder, tmp_path):
    assert run(make_builder(), "init-db") == EXIT_OK
    assert (tmp_path / "forecast.db").exists()

def test_regenerate_prints_result(make_builder, capsys):
    builder = make_builder(zero_forecast_text({16: 96}))
    add_site(builder)

    assert run(builder, "regenerate", "S1") == EXIT_OK

    output = json.loads(capsys.readouterr().out)
    assert output["site_id"] == "S1"
    assert output["target_date"] == "2026-10-19"
    assert output["predictions_generated"] == 48
    assert output["average_jam_probability"] == 2
    assert output["decode_ok"] is True

def test_regenerate_unknown_site(make_builder, capsys):
    assert run(make_builder(zero_forecast_text()), "regenerate", "ghost") == EXIT_NOT_FOUND
    assert json.loads(capsys.readouterr().out)["error"] == "Site not found"

def test_regenerate_predictor_failure(make_builder, capsys):
    builder = make_builder(PredictorUnreachable("connection refused"))
    add_site(builder)

    assert run(builder, "regenerate", "S1") == EXIT_FAILURE
    output = json.loads(capsys.readouterr().out)
    assert output == {"error": "Failed to regenerate predictions", "site_id": "S1"}

def test_daily_then_show(make_builder, capsys):
    builder = make_builder(zero_forecast_text({0: 10}))
    add_site(builder)
    add_site(builder, "S2")

    assert run(builder, "daily") == EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert report["processed"] == 2
    assert report["failed"] == 0

    assert run(builder, "show", "S1", "--date", "2026-10-19") == EXIT_OK
    shown = json.loads(capsys.readouterr().out)
    assert shown["status"] == "found"
    assert shown["forecast"]["predictions"][0]["jam_probability_percent"] == 10

def test_show_missing_forecast(make_builder, capsys):
    builder = make_builder()
    add_site(builder)

    assert run(builder, "show", "S1") == EXIT_NOT_FOUND
    assert json.loads(capsys.readouterr().out)["status"] == "not_found"

def test_overview(make_builder, capsys):
    builder = make_builder()
    add_site(builder)

    assert run(builder, "overview", "--date", "2026-10-19") == EXIT_OK
    output = json.loads(capsys.readouterr().out)
    assert output["total_sites"] == 1
    assert output["prediction_coverage"] == 0

def test_seed_history_writes_recent_days(make_builder):
    builder = make_builder()
    add_site(builder)

    assert run(builder, "seed-history", "S1", "--seed", "1") == EXIT_OK
    assert len(builder.averages.for_day("S1", date(2026, 10, 17))) == 48

def test_seed_history_unknown_site(make_builder):
    assert run(make_builder(), "seed-history", "ghost") == EXIT_NOT_FOUND

def test_daily_without_api_key_fails_cleanly(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    argv = ["--config-dir", str(CONF_DIR), "daily", f"database.url=sqlite:///{tmp_path / 'x.db'}"]
    assert main(argv) == EXIT_FAILURE

def test_main_rejects_missing_profile():
    assert main(["--config-dir", str(CONF_DIR), "--profile", "nope", "overview"]) == EXIT_FAILURE
