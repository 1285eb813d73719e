"""Reservation management API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends
import structlog

from tablebook.api.deps import get_backend, get_notifier
from tablebook.hooks import send_confirmation_call
from tablebook.integrations.callfluent import CallFluentClient
from tablebook.schemas.common import ApiResponse
from tablebook.schemas.reservation import (
    Reservation,
    ReservationCreate,
    ReservationStatus,
    ReservationStatusUpdate,
    ReservationUpdate,
)
from tablebook.storage.base import ReservationBackend

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=ApiResponse[List[Reservation]], response_model_exclude_none=True)
async def list_reservations(
    backend: ReservationBackend = Depends(get_backend),
):
    """List all reservations ordered by date and time"""
    reservations = await backend.list_reservations()
    return ApiResponse(success=True, data=reservations)


@router.post("", response_model=ApiResponse[Reservation], response_model_exclude_none=True, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    background_tasks: BackgroundTasks,
    backend: ReservationBackend = Depends(get_backend),
    notifier: Optional[CallFluentClient] = Depends(get_notifier),
):
    """Create a new reservation"""
    reservation = await backend.create_reservation(reservation_data)
    
    logger.info(
        "Reservation created",
        reservation_id=reservation.id,
        source=reservation.source.value,
        status=reservation.status.value,
    )
    
    if reservation.status == ReservationStatus.CONFIRMED:
        background_tasks.add_task(send_confirmation_call, notifier, reservation)
    
    return ApiResponse(success=True, data=reservation)


@router.get("/{reservation_id}", response_model=ApiResponse[Reservation], response_model_exclude_none=True)
async def get_reservation(
    reservation_id: str,
    backend: ReservationBackend = Depends(get_backend),
):
    """Get reservation details"""
    reservation = await backend.get_reservation(reservation_id)
    return ApiResponse(success=True, data=reservation)


@router.put("/{reservation_id}", response_model=ApiResponse[Reservation], response_model_exclude_none=True)
async def update_reservation(
    reservation_id: str,
    reservation_data: ReservationUpdate,
    backend: ReservationBackend = Depends(get_backend),
):
    """Replace every editable field of a reservation"""
    reservation = await backend.update_reservation(reservation_id, reservation_data)
    logger.info("Reservation updated", reservation_id=reservation_id)
    return ApiResponse(success=True, data=reservation)


@router.patch(
    "/{reservation_id}/status",
    response_model=ApiResponse[Reservation],
    response_model_exclude_none=True,
)
async def update_reservation_status(
    reservation_id: str,
    status_data: ReservationStatusUpdate,
    background_tasks: BackgroundTasks,
    backend: ReservationBackend = Depends(get_backend),
    notifier: Optional[CallFluentClient] = Depends(get_notifier),
):
    """Change reservation status; any status may move to any other"""
    existing = await backend.get_reservation(reservation_id)
    reservation = await backend.update_status(reservation_id, status_data.status)
    
    logger.info(
        "Reservation status changed",
        reservation_id=reservation_id,
        old_status=existing.status.value,
        new_status=reservation.status.value,
    )
    
    if reservation.status == ReservationStatus.CONFIRMED and existing.status != ReservationStatus.CONFIRMED:
        background_tasks.add_task(send_confirmation_call, notifier, reservation)
    
    return ApiResponse(success=True, data=reservation)


@router.delete("/{reservation_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_reservation(
    reservation_id: str,
    backend: ReservationBackend = Depends(get_backend),
):
    """Delete a reservation permanently"""
    await backend.delete_reservation(reservation_id)
    logger.info("Reservation deleted", reservation_id=reservation_id)
    return ApiResponse(success=True)
