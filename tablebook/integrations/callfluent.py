"""CallFluent AI outbound call client"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx
import structlog

from tablebook.config import Settings
from tablebook.errors import NotificationError
from tablebook.schemas.reservation import Reservation

logger = structlog.get_logger()


def format_date(value: str) -> str:
    """`2025-03-15` -> `Saturday, March 15`"""
    day = datetime.strptime(value, "%Y-%m-%d")
    return f"{day:%A}, {day:%B} {day.day}"


def format_time(value: str) -> str:
    """`19:30:00` -> `7:30 PM`"""
    hour, minute = (int(part) for part in value.split(":")[:2])
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {suffix}"


def format_party(party_size: int) -> str:
    return f"{party_size} {'person' if party_size == 1 else 'people'}"


def format_confirmation_message(reservation: Reservation) -> str:
    """Script the AI reads on a confirmation call"""
    return (
        f"Hello {reservation.customer_name}, this is a confirmation call for your reservation "
        f"on {format_date(reservation.date)} at {format_time(reservation.time)} "
        f"for {format_party(reservation.party_size)}. "
        "Please press 1 to confirm this reservation, or press 2 if you need to make changes."
    )


def format_reminder_message(reservation: Reservation) -> str:
    """Script the AI reads on a reminder call"""
    return (
        f"Hello {reservation.customer_name}, this is a friendly reminder about your upcoming "
        f"reservation on {format_date(reservation.date)} at {format_time(reservation.time)} "
        f"for {format_party(reservation.party_size)}. We look forward to seeing you. "
        "Press 1 to confirm you'll be attending, or press 2 if you need to make changes "
        "to your reservation."
    )


class CallFluentClient:
    """Places confirmation and reminder calls through the CallFluent API"""
    
    def __init__(
        self,
        api_endpoint: str,
        api_key: str,
        callback_number: str = "",
        auto_call_enabled: bool = True,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_endpoint = api_endpoint.rstrip("/")
        self.callback_number = callback_number
        self.auto_call_enabled = auto_call_enabled
        self.client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
    
    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["CallFluentClient"]:
        """Build a client, or return None when endpoint or key is missing"""
        if not settings.callfluent_configured:
            return None
        return cls(
            api_endpoint=settings.callfluent_api_endpoint,
            api_key=settings.callfluent_api_key,
            callback_number=settings.callfluent_callback_number,
            auto_call_enabled=settings.callfluent_auto_call_enabled,
            timeout=settings.callfluent_timeout_seconds,
        )
    
    async def close(self) -> None:
        await self.client.aclose()
    
    def build_payload(self, reservation: Reservation, message: str, call_type: Optional[str] = None) -> Dict[str, Any]:
        metadata = {
            "reservationDate": reservation.date,
            "reservationTime": reservation.time,
            "partySize": reservation.party_size,
            "customerName": reservation.customer_name,
        }
        if call_type:
            metadata["callType"] = call_type
        
        return {
            "phoneNumber": reservation.phone_number,
            "callbackNumber": self.callback_number,
            "message": message,
            "reservationId": reservation.id,
            "metadata": metadata,
        }
    
    async def _place_call(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.post(f"{self.api_endpoint}/calls", json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"CallFluent API returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationError(f"CallFluent API request failed: {e}") from e
        
        try:
            return response.json()
        except ValueError:
            return {}
    
    async def trigger_confirmation_call(self, reservation: Reservation) -> Dict[str, Any]:
        payload = self.build_payload(reservation, format_confirmation_message(reservation))
        result = await self._place_call(payload)
        logger.info("Confirmation call requested", reservation_id=reservation.id)
        return result
    
    async def trigger_reminder_call(self, reservation: Reservation) -> Dict[str, Any]:
        payload = self.build_payload(reservation, format_reminder_message(reservation), call_type="reminder")
        result = await self._place_call(payload)
        logger.info("Reminder call requested", reservation_id=reservation.id)
        return result
