"""
Mapping between the canonical reservation shape and persisted rows.

Rows use the snake_case column names of the `reservations` table. Both
directions are pure; callers validate before mapping.
"""

from datetime import date, datetime, time
from typing import Any, Dict, Mapping

from tablebook.schemas.reservation import Reservation, ReservationCreate


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def to_storage(data: ReservationCreate) -> Dict[str, Any]:
    """Map reservation fields (no id, no timestamps) to row columns"""
    return {
        "customer_name": data.customer_name,
        "phone_number": data.phone_number,
        "date": data.date,
        "time": data.time,
        "party_size": data.party_size,
        "source": _enum_value(data.source),
        "status": _enum_value(data.status),
        "notes": data.notes or "",
    }


def to_row(reservation: Reservation) -> Dict[str, Any]:
    """Map a complete reservation, id and timestamps included, to a row"""
    row = {"id": reservation.id}
    row.update(to_storage(reservation))
    row["created_at"] = reservation.created_at.isoformat()
    row["updated_at"] = reservation.updated_at.isoformat()
    return row


def _date_text(value: Any) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _time_text(value: Any) -> str:
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def from_storage(row: Mapping[str, Any]) -> Reservation:
    """Map a persisted row to the canonical reservation"""
    return Reservation(
        id=str(row["id"]),
        customer_name=row["customer_name"],
        phone_number=row["phone_number"],
        date=_date_text(row["date"]),
        time=_time_text(row["time"]),
        party_size=row["party_size"],
        source=row["source"],
        status=row["status"],
        notes=row.get("notes") or "",
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
