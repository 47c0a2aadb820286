import pytest
from datetime import datetime

from src.common.database import create_db_engine, create_session_factory, init_db
from src.prediction.domain import Site
from src.prediction.infrastructure import (
    SQLAlchemyHalfHourAverageRepository,
    SQLAlchemyPredictionStore,
    SQLAlchemyReadingRepository,
    SQLAlchemySiteRepository,
)
from tests.fakes import FixedClock, SimpleLunarCalendar

@pytest.fixture
def now():
    return datetime(2026, 10, 18, 2, 0)

@pytest.fixture
def clock(now):
    return FixedClock(now)

@pytest.fixture
def lunar_calendar():
    return SimpleLunarCalendar()

@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)

@pytest.fixture
def site_repo(session_factory):
    return SQLAlchemySiteRepository(session_factory)

@pytest.fixture
def reading_repo(session_factory):
    return SQLAlchemyReadingRepository(session_factory)

@pytest.fixture
def average_repo(session_factory):
    return SQLAlchemyHalfHourAverageRepository(session_factory)

@pytest.fixture
def store(session_factory):
    return SQLAlchemyPredictionStore(session_factory)

@pytest.fixture
def site(site_repo):
    site = Site(
        site_id="S1",
        name="Main St Sensor",
        location="Main St & 5th Ave",
        road1_name="Main St North",
        road2_name="Main St South",
    )
    site_repo.add(site)
    return site
