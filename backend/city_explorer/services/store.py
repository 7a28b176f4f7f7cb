"""Cache store: read/write access to the locations, weathers and events tables."""

import logging
from typing import Any, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreError
from ..models.database import Base
from ..models.event import EventModel
from ..models.location import LocationModel
from ..models.weather import WeatherDayModel
from .records import EntityKind, Record, record_columns

logger = logging.getLogger(__name__)

# Entity kind -> (ORM model, lookup key column)
TABLES: dict[EntityKind, tuple[type[Base], Any]] = {
    EntityKind.LOCATION: (LocationModel, LocationModel.search_query),
    EntityKind.WEATHER: (WeatherDayModel, WeatherDayModel.location_id),
    EntityKind.EVENT: (EventModel, EventModel.location_id),
}


class CacheStore:
    """Row lookups and inserts over one SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find(self, kind: EntityKind, key_value: Any) -> list:
        """Rows whose key column equals key_value, oldest first. Empty on miss."""
        model, key_column = TABLES[kind]
        try:
            rows = self._db.scalars(
                select(model).where(key_column == key_value).order_by(model.id)
            ).all()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StoreError(f"lookup in {kind.value} failed: {exc}") from exc
        return list(rows)

    def insert_one(self, kind: EntityKind, record: Record, **columns: Any):
        """Insert a single record and return the created row."""
        return self.insert_batch(kind, [record], **columns)[0]

    def insert_batch(self, kind: EntityKind, records: Sequence[Record], **columns: Any) -> list:
        """Insert all records in one transaction.

        ``columns`` are attached to every row (e.g. ``location_id``). Either
        every row is committed or none is.
        """
        model, _ = TABLES[kind]
        rows = [model(**record_columns(record), **columns) for record in records]
        if not rows:
            return []
        try:
            self._db.add_all(rows)
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            if kind is EntityKind.LOCATION and len(rows) == 1:
                # Another request inserted the same search query first
                existing = self.find(kind, records[0].search_query)
                if existing:
                    logger.info("Location %r already stored, reusing row", records[0].search_query)
                    return existing
            raise StoreError(f"insert into {kind.value} failed: {exc}") from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StoreError(f"insert into {kind.value} failed: {exc}") from exc

        return self._refreshed(kind, rows)

    def replace_batch(
        self, kind: EntityKind, location_id: int, records: Sequence[Record], **columns: Any
    ) -> list:
        """Swap every row owned by location_id for records, in one transaction.

        If anything fails the previous rows are kept.
        """
        self._check_owned(kind)
        model, _ = TABLES[kind]
        rows = [
            model(**record_columns(record), location_id=location_id, **columns)
            for record in records
        ]
        try:
            result = self._db.execute(
                delete(model).where(model.location_id == location_id)
            )
            self._db.add_all(rows)
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StoreError(f"replace in {kind.value} failed: {exc}") from exc

        logger.debug("Replaced %d row(s) in %s for location %s",
                     result.rowcount, kind.value, location_id)
        return self._refreshed(kind, rows)

    def delete_by_location(self, kind: EntityKind, location_id: int) -> int:
        """Delete every row owned by location_id; returns the count deleted."""
        self._check_owned(kind)
        model, _ = TABLES[kind]
        try:
            result = self._db.execute(
                delete(model).where(model.location_id == location_id)
            )
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StoreError(f"delete from {kind.value} failed: {exc}") from exc
        return result.rowcount

    @staticmethod
    def _check_owned(kind: EntityKind) -> None:
        if kind is EntityKind.LOCATION:
            raise ValueError("locations are never deleted")

    def _refreshed(self, kind: EntityKind, rows: list) -> list:
        for row in rows:
            self._db.refresh(row)
        logger.debug("Inserted %d row(s) into %s", len(rows), kind.value)
        return rows
