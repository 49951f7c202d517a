import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.core import config
from backend.core.exceptions import SlotConflictError, StoreUnavailableError
from backend.models.appointment import STATUS_CONFIRMED
from backend.routes.common import (
    AppointmentResponse,
    database_unavailable,
    ensure_database_ready,
    get_db,
    normalize_iso_date,
    parse_date_param,
    today_iso,
)
from backend.services import messaging, reservations
from backend.services.aggregation import slot_sort_key
from backend.store.appointment_store import AppointmentStore

router = APIRouter(tags=['booking'])

logger = logging.getLogger(__name__)

MAX_CLIENT_NAME_LENGTH = 120
MAX_PHONE_LENGTH = 32
SLOT_TAKEN_DETAIL = 'This time slot was just taken. Please choose another one.'


class CreateAppointmentRequest(BaseModel):
    client_name: str
    phone: str
    date: str
    time: str

    @field_validator('client_name')
    @classmethod
    def validate_client_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        if len(normalized) > MAX_CLIENT_NAME_LENGTH:
            raise ValueError(f'Name must be {MAX_CLIENT_NAME_LENGTH} characters or fewer.')
        return normalized

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Phone number is required.')
        if len(normalized) > MAX_PHONE_LENGTH:
            raise ValueError(f'Phone number must be {MAX_PHONE_LENGTH} characters or fewer.')
        return normalized

    @field_validator('date')
    @classmethod
    def validate_date(cls, value: str) -> str:
        try:
            return normalize_iso_date(value)
        except ValueError as exc:
            raise ValueError('Date must be in YYYY-MM-DD format.') from exc

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str) -> str:
        normalized = value.strip()
        if normalized not in config.SLOT_CATALOGUE:
            raise ValueError('Time must be one of the available slots.')
        return normalized


class SlotAvailabilityResponse(BaseModel):
    date: str
    occupied: list[str]
    available: list[str]


class BookingResponse(AppointmentResponse):
    message_link: str | None = None


def build_confirmation_link(client_name: str, date: str, time: str, phone: str) -> str | None:
    message = messaging.build_booking_message(client_name, date, time, phone)
    try:
        return messaging.build_message_link(config.BARBER_WHATSAPP_NUMBER, message)
    except ValueError:
        logger.warning('Skipping confirmation link for %s %s: shop number not configured', date, time)
        return None


@router.get('/slot-catalogue', response_model=list[str])
def list_slot_catalogue():
    return list(config.SLOT_CATALOGUE)


@router.get('/slots', response_model=SlotAvailabilityResponse)
def list_slots(
    date: str = Query(...),
    db: Session = Depends(get_db),
):
    slot_date = parse_date_param(date)

    ensure_database_ready()

    try:
        occupied = reservations.list_occupied_slots(AppointmentStore(db), slot_date)
    except StoreUnavailableError as exc:
        raise database_unavailable() from exc

    return SlotAvailabilityResponse(
        date=slot_date,
        occupied=sorted(occupied, key=slot_sort_key),
        available=reservations.available_slots(config.SLOT_CATALOGUE, occupied),
    )


@router.post('/appointments', response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(data: CreateAppointmentRequest, db: Session = Depends(get_db)):
    if data.date < today_iso():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Appointments cannot be booked for past dates.',
        )

    ensure_database_ready()

    try:
        appointment_id = reservations.create_appointment(
            AppointmentStore(db),
            client_name=data.client_name,
            phone=data.phone,
            date=data.date,
            time=data.time,
        )
    except SlotConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=SLOT_TAKEN_DETAIL,
        ) from exc
    except StoreUnavailableError as exc:
        raise database_unavailable() from exc

    # The booking is committed at this point; the link is only a convenience.
    return BookingResponse(
        id=appointment_id,
        client_name=data.client_name,
        phone=data.phone,
        date=data.date,
        time=data.time,
        status=STATUS_CONFIRMED,
        message_link=build_confirmation_link(data.client_name, data.date, data.time, data.phone),
    )
