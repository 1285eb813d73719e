"""CallFluent AI webhook payload"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from tablebook.errors import InvalidDateFormat, InvalidTimeFormat
from tablebook.schemas.reservation import ReservationCreate, ReservationSource, ReservationStatus
from tablebook.validation import check_phone_number, normalize_date, normalize_time


class CallFluentWebhookPayload(BaseModel):
    """
    Reservation captured by the CallFluent AI on a phone call.
    
    Date and time are normalized while validating, so a parsed payload always
    carries canonical `YYYY-MM-DD` / `HH:MM:SS` values. Any `source` or
    `status` sent by the caller is ignored.
    """
    name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    date: str
    time: str
    party_size: int = Field(..., alias="partySize", gt=0, strict=True)
    notes: Optional[str] = None
    
    class Config:
        populate_by_name = True
        str_strip_whitespace = True
    
    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        return check_phone_number(value)
    
    @field_validator("date")
    @classmethod
    def normalize_date_field(cls, value: str) -> str:
        try:
            return normalize_date(value)
        except InvalidDateFormat as exc:
            raise PydanticCustomError(exc.code, exc.message)
    
    @field_validator("time")
    @classmethod
    def normalize_time_field(cls, value: str) -> str:
        try:
            return normalize_time(value)
        except InvalidTimeFormat as exc:
            raise PydanticCustomError(exc.code, exc.message)
    
    def to_reservation(self) -> ReservationCreate:
        return ReservationCreate(
            customer_name=self.name,
            phone_number=self.phone_number,
            date=self.date,
            time=self.time,
            party_size=self.party_size,
            source=ReservationSource.AI_CALL,
            status=ReservationStatus.PENDING,
            notes=self.notes or "",
        )
