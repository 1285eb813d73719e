"""Persistence port implemented by every storage backend"""

from abc import ABC, abstractmethod
from typing import List

from tablebook.schemas.reservation import Reservation, ReservationCreate, ReservationStatus


class ReservationBackend(ABC):
    """
    Uniform CRUD interface over one concrete store.
    
    Lookups and mutations on an unknown id raise `NotFoundError`; failures of
    the underlying store raise `BackendOperationError`.
    """
    
    name: str = "base"
    
    async def probe(self) -> None:
        """Check the backend can serve requests; raise `BackendUnavailableError` if not"""
    
    async def close(self) -> None:
        """Release connections held by the backend"""
    
    @abstractmethod
    async def list_reservations(self) -> List[Reservation]:
        """All reservations ordered by date, then time"""
    
    @abstractmethod
    async def get_reservation(self, reservation_id: str) -> Reservation:
        pass
    
    @abstractmethod
    async def create_reservation(self, data: ReservationCreate) -> Reservation:
        pass
    
    @abstractmethod
    async def update_reservation(self, reservation_id: str, data: ReservationCreate) -> Reservation:
        pass
    
    @abstractmethod
    async def update_status(self, reservation_id: str, status: ReservationStatus) -> Reservation:
        pass
    
    @abstractmethod
    async def delete_reservation(self, reservation_id: str) -> None:
        pass
