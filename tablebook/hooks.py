"""Post-commit side effects, run as background tasks after the response"""

from typing import Optional

import structlog

from tablebook.errors import NotificationError
from tablebook.integrations.callfluent import CallFluentClient
from tablebook.schemas.reservation import Reservation

logger = structlog.get_logger()


async def send_confirmation_call(notifier: Optional[CallFluentClient], reservation: Reservation) -> None:
    """Ask CallFluent to call the guest; failures are logged, never raised"""
    if notifier is None or not notifier.auto_call_enabled:
        logger.debug("Auto-calling disabled or not configured", reservation_id=reservation.id)
        return
    
    try:
        await notifier.trigger_confirmation_call(reservation)
    except NotificationError as e:
        logger.warning(
            "Confirmation call failed",
            reservation_id=reservation.id,
            error=e.message,
        )
