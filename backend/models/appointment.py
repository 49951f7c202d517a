"""Appointment model definitions."""

import uuid

from sqlalchemy import Column, DateTime, Index, String, func, text
from backend.database import Base

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"
APPOINTMENT_STATUSES = (STATUS_CONFIRMED, STATUS_CANCELLED)

_CONFIRMED_ONLY = text("status = 'confirmed'")


def generate_appointment_id() -> str:
    return uuid.uuid4().hex


class Appointment(Base):
    """Represents a booked barbershop slot.

    Cancelled rows are kept for history; only confirmed rows occupy their slot.
    """
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_date_time", "date", "time"),
        # At most one confirmed appointment per (date, time).
        Index(
            "uq_appointments_confirmed_slot",
            "date",
            "time",
            unique=True,
            postgresql_where=_CONFIRMED_ONLY,
            sqlite_where=_CONFIRMED_ONLY,
        ),
    )

    id = Column(String(32), primary_key=True, default=generate_appointment_id)
    client_name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    date = Column(String(10), nullable=False, index=True)
    time = Column(String(16), nullable=False)
    status = Column(String, nullable=False, default=STATUS_CONFIRMED)
    cancellation_reason = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
