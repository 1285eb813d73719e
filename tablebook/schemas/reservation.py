"""Reservation schemas"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from tablebook.validation import check_canonical_date, check_canonical_time, check_phone_number


class ReservationSource(str, Enum):
    """Where a reservation came from"""
    AI_CALL = "AI Call"
    MANUAL = "Manual"


class ReservationStatus(str, Enum):
    """Reservation lifecycle state"""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire"""
    
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ReservationCreate(CamelModel):
    """Create reservation request"""
    customer_name: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    date: str
    time: str
    party_size: int = Field(..., gt=0, strict=True)
    source: ReservationSource = ReservationSource.MANUAL
    status: ReservationStatus = ReservationStatus.PENDING
    notes: Optional[str] = ""
    
    class Config:
        str_strip_whitespace = True
    
    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, value: str) -> str:
        return check_phone_number(value)
    
    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return check_canonical_date(value)
    
    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return check_canonical_time(value)
    
    @field_validator("notes")
    @classmethod
    def default_notes(cls, value: Optional[str]) -> str:
        return value or ""


class ReservationUpdate(ReservationCreate):
    """Full update request; every field except id and timestamps is replaced"""


class ReservationStatusUpdate(BaseModel):
    """Status-only update request"""
    status: ReservationStatus


class Reservation(CamelModel):
    """Reservation response"""
    id: str
    customer_name: str
    phone_number: str
    date: str
    time: str
    party_size: int
    source: ReservationSource
    status: ReservationStatus
    notes: str = ""
    created_at: datetime
    updated_at: datetime
