"""Reservation store backed by SQLAlchemy (Postgres via asyncpg, SQLite via aiosqlite)"""

import datetime as dt
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from tablebook.database import Base, create_engine, create_session_factory
from tablebook.errors import BackendOperationError, BackendUnavailableError, NotFoundError
from tablebook.mapping import from_storage, to_storage
from tablebook.models.reservation import ReservationRecord, utcnow
from tablebook.schemas.reservation import Reservation, ReservationCreate, ReservationStatus
from tablebook.storage.base import ReservationBackend

logger = structlog.get_logger()


def _operation_error(exc: SQLAlchemyError) -> BackendOperationError:
    code = exc.__class__.__name__
    message = str(exc)
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None) or code
        message = str(exc.orig)
    return BackendOperationError(message, code=code)


def _columns(data: ReservationCreate) -> Dict[str, Any]:
    values = to_storage(data)
    values["date"] = dt.date.fromisoformat(values["date"])
    values["time"] = dt.time.fromisoformat(values["time"])
    return values


def _parse_id(reservation_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(reservation_id)
    except ValueError:
        raise NotFoundError()


class SqlBackend(ReservationBackend):
    """Reservations in a relational database through an async SQLAlchemy engine"""
    
    name = "sql"
    
    def __init__(self, database_url: str = "", echo: bool = False, engine: Optional[AsyncEngine] = None):
        self.engine = engine or create_engine(database_url, echo=echo)
        self.session_factory = create_session_factory(self.engine)
    
    async def probe(self) -> None:
        """Create the table if needed and check it answers a query"""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                await conn.execute(select(func.count(ReservationRecord.id)))
        except (SQLAlchemyError, OSError) as e:
            raise BackendUnavailableError(f"Database probe failed: {e}")
    
    async def close(self) -> None:
        await self.engine.dispose()
    
    @asynccontextmanager
    async def _session(self):
        async with self.session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Database operation failed", backend=self.name, error=str(e))
                raise _operation_error(e) from e
    
    async def _load(self, session: AsyncSession, reservation_id: str) -> ReservationRecord:
        record = await session.get(ReservationRecord, _parse_id(reservation_id))
        if record is None:
            raise NotFoundError()
        return record
    
    @staticmethod
    def _to_reservation(record: ReservationRecord) -> Reservation:
        row = record.as_row()
        # SQLite drops tzinfo; timestamps are always written in UTC
        for key in ("created_at", "updated_at"):
            if row[key] is not None and row[key].tzinfo is None:
                row[key] = row[key].replace(tzinfo=dt.timezone.utc)
        return from_storage(row)
    
    async def list_reservations(self) -> List[Reservation]:
        async with self._session() as session:
            result = await session.execute(
                select(ReservationRecord).order_by(ReservationRecord.date, ReservationRecord.time)
            )
            return [self._to_reservation(record) for record in result.scalars().all()]
    
    async def get_reservation(self, reservation_id: str) -> Reservation:
        async with self._session() as session:
            record = await self._load(session, reservation_id)
            return self._to_reservation(record)
    
    async def create_reservation(self, data: ReservationCreate) -> Reservation:
        now = utcnow()
        async with self._session() as session:
            record = ReservationRecord(**_columns(data), created_at=now, updated_at=now)
            session.add(record)
            await session.commit()
            return self._to_reservation(record)
    
    async def update_reservation(self, reservation_id: str, data: ReservationCreate) -> Reservation:
        async with self._session() as session:
            record = await self._load(session, reservation_id)
            for field, value in _columns(data).items():
                setattr(record, field, value)
            record.updated_at = utcnow()
            await session.commit()
            return self._to_reservation(record)
    
    async def update_status(self, reservation_id: str, status: ReservationStatus) -> Reservation:
        async with self._session() as session:
            record = await self._load(session, reservation_id)
            record.status = status.value
            record.updated_at = utcnow()
            await session.commit()
            return self._to_reservation(record)
    
    async def delete_reservation(self, reservation_id: str) -> None:
        async with self._session() as session:
            record = await self._load(session, reservation_id)
            await session.delete(record)
            await session.commit()
