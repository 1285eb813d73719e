"""CallFluent AI webhook handlers"""

from fastapi import APIRouter, Depends
import structlog

from tablebook.api.deps import get_backend
from tablebook.schemas.common import ApiResponse
from tablebook.schemas.reservation import Reservation
from tablebook.schemas.webhook import CallFluentWebhookPayload
from tablebook.storage.base import ReservationBackend

router = APIRouter()
logger = structlog.get_logger()


@router.post("/callfluent", response_model=ApiResponse[Reservation], response_model_exclude_none=True, status_code=201)
async def handle_callfluent_webhook(
    payload: CallFluentWebhookPayload,
    backend: ReservationBackend = Depends(get_backend),
):
    """
    Store a reservation captured by the CallFluent AI on a phone call.
    The record always starts as a Pending "AI Call" reservation.
    """
    logger.info(
        "CallFluent webhook received",
        date=payload.date,
        time=payload.time,
        party_size=payload.party_size,
    )
    
    reservation = await backend.create_reservation(payload.to_reservation())
    
    logger.info("Reservation created from CallFluent call", reservation_id=reservation.id)
    
    return ApiResponse(success=True, data=reservation)
