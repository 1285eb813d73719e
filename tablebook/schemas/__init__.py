"""Pydantic schemas for request/response validation"""

from tablebook.schemas.common import ApiResponse
from tablebook.schemas.reservation import (
    Reservation,
    ReservationCreate,
    ReservationSource,
    ReservationStatus,
    ReservationStatusUpdate,
    ReservationUpdate,
)
from tablebook.schemas.webhook import CallFluentWebhookPayload

__all__ = [
    "ApiResponse",
    "Reservation",
    "ReservationCreate",
    "ReservationSource",
    "ReservationStatus",
    "ReservationStatusUpdate",
    "ReservationUpdate",
    "CallFluentWebhookPayload",
]
