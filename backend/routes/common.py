from datetime import date, datetime

from fastapi import HTTPException, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from backend.database import SessionLocal, ensure_appointment_schema

DATABASE_UNAVAILABLE_DETAIL = 'Database unavailable. Verify DATABASE_URL and database credentials.'
APPOINTMENT_NOT_FOUND_DETAIL = 'Appointment not found.'


class AppointmentResponse(BaseModel):
    id: str
    client_name: str
    phone: str
    date: str
    time: str
    status: str
    cancellation_reason: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


def database_unavailable() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def normalize_iso_date(value: str) -> str:
    """Return ``value`` as a zero-padded ``YYYY-MM-DD`` string or raise ValueError."""
    return date.fromisoformat(value.strip()).isoformat()


def parse_date_param(value: str, field_name: str = 'date') -> str:
    try:
        return normalize_iso_date(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Invalid {field_name}. Use YYYY-MM-DD.',
        ) from exc


def today_iso() -> str:
    return date.today().isoformat()
