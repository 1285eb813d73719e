"""Reservation model"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text, Time, Uuid

from tablebook.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReservationRecord(Base):
    """Table reservations"""
    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("party_size > 0", name="ck_reservations_party_size"),
        CheckConstraint("source IN ('AI Call', 'Manual')", name="ck_reservations_source"),
        CheckConstraint(
            "status IN ('Pending', 'Confirmed', 'Cancelled')",
            name="ck_reservations_status",
        ),
        Index("idx_reservations_date", "date"),
        Index("idx_reservations_status", "status"),
        Index("idx_reservations_phone", "phone_number"),
    )
    
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    
    # Customer information
    customer_name = Column(Text, nullable=False)
    phone_number = Column(Text, nullable=False)
    
    # Reservation details
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    party_size = Column(Integer, nullable=False)
    
    source = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="Pending")
    notes = Column(Text)
    
    # Metadata
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    
    def as_row(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
