from .database import Base, DATABASE_URL, create_db_engine, create_session_factory, init_db
from .models import SiteDB, ReadingDB, HalfHourAverageDB, PredictionDB

__all__ = [
    "Base", "DATABASE_URL", "create_db_engine", "create_session_factory", "init_db",
    "SiteDB", "ReadingDB", "HalfHourAverageDB", "PredictionDB",
]
