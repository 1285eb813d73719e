"""In-memory reservation store"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

import structlog

from tablebook.errors import NotFoundError
from tablebook.schemas.reservation import (
    Reservation,
    ReservationCreate,
    ReservationSource,
    ReservationStatus,
)
from tablebook.storage.base import ReservationBackend

logger = structlog.get_logger()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def sample_reservations(now: Optional[datetime] = None) -> List[Reservation]:
    """Demo records so a fresh dashboard is never empty"""
    now = now or utcnow()
    today = now.date().isoformat()
    
    return [
        Reservation(
            id=str(uuid.uuid4()),
            customer_name="Demo User 1",
            phone_number="555-0101",
            date=today,
            time="18:00:00",
            party_size=2,
            source=ReservationSource.MANUAL,
            status=ReservationStatus.CONFIRMED,
            notes="Sample reservation 1",
            created_at=now,
            updated_at=now,
        ),
        Reservation(
            id=str(uuid.uuid4()),
            customer_name="Demo User 2",
            phone_number="555-0102",
            date=today,
            time="19:30:00",
            party_size=4,
            source=ReservationSource.AI_CALL,
            status=ReservationStatus.PENDING,
            notes="Sample reservation 2",
            created_at=now,
            updated_at=now,
        ),
    ]


class InMemoryBackend(ReservationBackend):
    """Process-local store; concurrent writers are last-write-wins"""
    
    name = "memory"
    
    def __init__(self, seed: Optional[Iterable[Reservation]] = None):
        self._reservations: Dict[str, Reservation] = {}
        for reservation in seed or ():
            self._reservations[reservation.id] = reservation
    
    def __len__(self) -> int:
        return len(self._reservations)
    
    def _get(self, reservation_id: str) -> Reservation:
        reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise NotFoundError()
        return reservation
    
    def _touch(self, reservation: Reservation) -> datetime:
        # updated_at never goes behind created_at, even with clock skew
        return max(utcnow(), reservation.created_at)
    
    async def _commit(self, reservations: Dict[str, Reservation]) -> None:
        """Install the next state; subclasses persist it first and may refuse"""
        self._reservations = reservations
    
    async def list_reservations(self) -> List[Reservation]:
        return sorted(self._reservations.values(), key=lambda r: (r.date, r.time))
    
    async def get_reservation(self, reservation_id: str) -> Reservation:
        return self._get(reservation_id)
    
    async def create_reservation(self, data: ReservationCreate) -> Reservation:
        now = utcnow()
        reservation = Reservation(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        await self._commit({**self._reservations, reservation.id: reservation})
        
        logger.debug("Reservation stored", backend=self.name, reservation_id=reservation.id)
        return reservation
    
    async def update_reservation(self, reservation_id: str, data: ReservationCreate) -> Reservation:
        existing = self._get(reservation_id)
        reservation = existing.model_copy(
            update={**data.model_dump(), "updated_at": self._touch(existing)}
        )
        await self._commit({**self._reservations, reservation_id: reservation})
        return reservation
    
    async def update_status(self, reservation_id: str, status: ReservationStatus) -> Reservation:
        existing = self._get(reservation_id)
        reservation = existing.model_copy(
            update={"status": status, "updated_at": self._touch(existing)}
        )
        await self._commit({**self._reservations, reservation_id: reservation})
        return reservation
    
    async def delete_reservation(self, reservation_id: str) -> None:
        self._get(reservation_id)
        remaining = dict(self._reservations)
        del remaining[reservation_id]
        await self._commit(remaining)
