import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Default to a local sqlite file if not specified
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///congestion_forecast.db"
)

Base = declarative_base()

def create_db_engine(url: str = DATABASE_URL, echo: bool = False) -> Engine:
    """Creates an engine; in-memory sqlite shares one connection across threads."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def init_db(engine: Engine):
    """Initialize database tables."""
    # Import models here to ensure they are registered with Base
    from . import models
    Base.metadata.create_all(bind=engine)
