import json
from contextlib import contextmanager
from datetime import date, datetime
from typing import Iterator, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..domain import (
    HalfHourAverage, PredictionRecord, Reading, Site, SLOTS_PER_DAY, day_bounds,
)
from ...common.database.models import HalfHourAverageDB, PredictionDB, ReadingDB, SiteDB
from ...common.exceptions import InvalidStoredPrediction, StorageFailure

class SQLAlchemyRepository:
    """
    Opens one short-lived session per operation so concurrent site pipelines
    never share a session.
    """
    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageFailure(f"{type(self).__name__}: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

class SQLAlchemySiteRepository(SQLAlchemyRepository):
    @staticmethod
    def _to_entity(row: SiteDB) -> Site:
        return Site(
            site_id=row.site_id,
            name=row.name,
            location=row.location,
            road1_name=row.road1_name or "",
            road2_name=row.road2_name or "",
            last_seen_at=row.last_seen_at,
        )

    def add(self, site: Site) -> None:
        with self._session() as session:
            session.add(SiteDB(
                site_id=site.site_id,
                name=site.name,
                location=site.location,
                road1_name=site.road1_name,
                road2_name=site.road2_name,
                last_seen_at=site.last_seen_at,
            ))

    def list_sites(self) -> List[Site]:
        with self._session() as session:
            rows = session.scalars(select(SiteDB).order_by(SiteDB.site_id)).all()
            return [self._to_entity(row) for row in rows]

    def get_site(self, site_id: str) -> Optional[Site]:
        with self._session() as session:
            row = session.get(SiteDB, site_id)
            return self._to_entity(row) if row else None

class SQLAlchemyReadingRepository(SQLAlchemyRepository):
    def add_many(self, readings: Sequence[Reading], batch_id: Optional[str] = None) -> None:
        with self._session() as session:
            session.add_all([
                ReadingDB(
                    site_id=reading.site_id,
                    road1_jam_percent=reading.value1,
                    road2_jam_percent=reading.value2,
                    batch_id=batch_id,
                    timestamp=reading.timestamp,
                )
                for reading in readings
            ])

    def readings_between(self, site_id: str, start: datetime, end: datetime) -> List[Reading]:
        with self._session() as session:
            rows = session.scalars(
                select(ReadingDB)
                .where(ReadingDB.site_id == site_id, ReadingDB.timestamp >= start, ReadingDB.timestamp < end)
                .order_by(ReadingDB.timestamp, ReadingDB.id)
            ).all()
            return [
                Reading(site_id=row.site_id, value1=row.road1_jam_percent, value2=row.road2_jam_percent, timestamp=row.timestamp)
                for row in rows
            ]

class SQLAlchemyHalfHourAverageRepository(SQLAlchemyRepository):
    @staticmethod
    def _to_row(record: HalfHourAverage) -> HalfHourAverageDB:
        return HalfHourAverageDB(
            site_id=record.site_id,
            timestamp=record.timestamp,
            half_hour_index=record.slot_index,
            average_value=record.value,
        )

    def append(self, records: Sequence[HalfHourAverage]) -> None:
        with self._session() as session:
            session.add_all([self._to_row(record) for record in records])

    def replace_slots(self, site_id: str, day: date, records: Sequence[HalfHourAverage]) -> None:
        start, end = day_bounds(day)
        slots = [record.slot_index for record in records]
        with self._session() as session:
            session.execute(
                delete(HalfHourAverageDB).where(
                    HalfHourAverageDB.site_id == site_id,
                    HalfHourAverageDB.timestamp >= start,
                    HalfHourAverageDB.timestamp < end,
                    HalfHourAverageDB.half_hour_index.in_(slots),
                )
            )
            session.add_all([self._to_row(record) for record in records])

    def for_day(self, site_id: str, day: date) -> List[HalfHourAverage]:
        start, end = day_bounds(day)
        with self._session() as session:
            rows = session.scalars(
                select(HalfHourAverageDB)
                .where(
                    HalfHourAverageDB.site_id == site_id,
                    HalfHourAverageDB.timestamp >= start,
                    HalfHourAverageDB.timestamp < end,
                )
                .order_by(HalfHourAverageDB.half_hour_index, HalfHourAverageDB.id)
            ).all()
            return [
                HalfHourAverage(
                    site_id=row.site_id,
                    timestamp=row.timestamp,
                    slot_index=row.half_hour_index,
                    value=row.average_value,
                    id=row.id,
                )
                for row in rows
            ]

def decode_stored_values(raw: str) -> List[int]:
    try:
        values = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InvalidStoredPrediction(f"stored values are not JSON: {e}") from e
    if not isinstance(values, list) or len(values) != SLOTS_PER_DAY:
        raise InvalidStoredPrediction(f"expected a list of {SLOTS_PER_DAY} values")
    if not all(isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 100 for v in values):
        raise InvalidStoredPrediction("stored values must be integers in [0, 100]")
    return values

class SQLAlchemyPredictionStore(SQLAlchemyRepository):
    """
    Append-only forecast store. The authoritative record for a (site, date) is
    the latest generated_at, ties broken by the highest id.
    """
    def put(self, site_id: str, target_date: date, values: Sequence[int], generated_at: datetime) -> PredictionRecord:
        values = list(values)
        if len(values) != SLOTS_PER_DAY or not all(
            isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 100 for v in values
        ):
            raise ValueError(f"a prediction must be {SLOTS_PER_DAY} integers in [0, 100]")

        with self._session() as session:
            row = PredictionDB(
                site_id=site_id,
                prediction_date=target_date,
                predicted_values=json.dumps(values),
                generated_at=generated_at,
            )
            session.add(row)
            session.flush()
            return PredictionRecord(
                site_id=site_id,
                target_date=target_date,
                values=values,
                generated_at=generated_at,
                id=row.id,
            )

    def get(self, site_id: str, target_date: date) -> Optional[PredictionRecord]:
        with self._session() as session:
            row = session.scalars(
                select(PredictionDB)
                .where(PredictionDB.site_id == site_id, PredictionDB.prediction_date == target_date)
                .order_by(PredictionDB.generated_at.desc(), PredictionDB.id.desc())
                .limit(1)
            ).first()
            if row is None:
                return None
            return PredictionRecord(
                site_id=row.site_id,
                target_date=row.prediction_date,
                values=decode_stored_values(row.predicted_values),
                generated_at=row.generated_at,
                id=row.id,
            )
