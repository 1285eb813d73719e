"""Database models"""

from tablebook.models.reservation import ReservationRecord

__all__ = [
    "ReservationRecord",
]
