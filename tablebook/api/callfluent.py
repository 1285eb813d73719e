"""CallFluent AI action endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends
import structlog

from tablebook.api.deps import get_backend, get_notifier
from tablebook.errors import IntegrationNotConfiguredError
from tablebook.integrations.callfluent import CallFluentClient
from tablebook.schemas.common import ApiResponse
from tablebook.schemas.reservation import Reservation, ReservationSource, ReservationStatus
from tablebook.storage.base import ReservationBackend
from tablebook.storage.memory import utcnow

router = APIRouter()
logger = structlog.get_logger()


def _require(notifier: Optional[CallFluentClient]) -> CallFluentClient:
    if notifier is None:
        raise IntegrationNotConfiguredError()
    return notifier


def connection_test_reservation() -> Reservation:
    now = utcnow()
    return Reservation(
        id="test-id",
        customer_name="Test Customer",
        phone_number="+1234567890",
        date=now.date().isoformat(),
        time="18:00:00",
        party_size=2,
        source=ReservationSource.MANUAL,
        status=ReservationStatus.PENDING,
        notes="This is a test reservation for API connection verification",
        created_at=now,
        updated_at=now,
    )


@router.post("/test", response_model=ApiResponse[None], response_model_exclude_none=True)
async def test_connection(
    notifier: Optional[CallFluentClient] = Depends(get_notifier),
):
    """Place a confirmation call for a throwaway reservation to verify credentials"""
    client = _require(notifier)
    await client.trigger_confirmation_call(connection_test_reservation())
    
    logger.info("CallFluent connection test succeeded")
    return ApiResponse(success=True, message="Successfully connected to CallFluent API")


@router.post(
    "/trigger-reminder/{reservation_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
)
async def trigger_reminder(
    reservation_id: str,
    backend: ReservationBackend = Depends(get_backend),
    notifier: Optional[CallFluentClient] = Depends(get_notifier),
):
    """Ask CallFluent to place a reminder call for a reservation"""
    reservation = await backend.get_reservation(reservation_id)
    client = _require(notifier)
    await client.trigger_reminder_call(reservation)
    
    return ApiResponse(success=True, message="Reminder call triggered successfully")
