from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from backend.core import config
from backend.core.exceptions import StoreUnavailableError
from backend.routes.booking_routes import (
    CreateAppointmentRequest,
    book_appointment,
    list_slot_catalogue,
    list_slots,
)
from backend.routes.common import AppointmentResponse
from backend.services import reservations


def _upcoming_day(days: int = 7) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def _request(**overrides) -> CreateAppointmentRequest:
    fields = {
        'client_name': 'Luis',
        'phone': '5555-1234',
        'date': _upcoming_day(),
        'time': '10:00 AM',
    }
    fields.update(overrides)
    return CreateAppointmentRequest(**fields)


def test_create_appointment_request_normalizes_fields() -> None:
    request = CreateAppointmentRequest(
        client_name='  Ana García ',
        phone=' +502 5555-0000 ',
        date=' 2024-06-01 ',
        time=' 10:00 AM ',
    )

    assert request.client_name == 'Ana García'
    assert request.phone == '+502 5555-0000'
    assert request.date == '2024-06-01'
    assert request.time == '10:00 AM'


@pytest.mark.parametrize(
    'overrides',
    [
        {'client_name': '   '},
        {'phone': ''},
        {'date': '01/06/2024'},
        {'time': '01:00 PM'},
        {'time': '10:15 AM'},
    ],
)
def test_create_appointment_request_rejects_invalid_input(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        _request(**overrides)


def test_list_slot_catalogue_returns_configured_slots() -> None:
    assert list_slot_catalogue() == list(config.SLOT_CATALOGUE)


def test_list_slots_splits_catalogue_into_occupied_and_available(
    store,
    appointment_db,
    skip_schema_check,
) -> None:
    reservations.create_appointment(store, 'Luis', '5555-1234', '2024-06-01', '02:00 PM')
    reservations.create_appointment(store, 'Ana', '5555-0000', '2024-06-01', '09:30 AM')
    cancelled_id = reservations.create_appointment(store, 'Pedro', '5555-9999', '2024-06-01', '11:00 AM')
    reservations.cancel_appointment(store, cancelled_id)

    response = list_slots(date='2024-06-01', db=appointment_db)

    assert response.date == '2024-06-01'
    assert response.occupied == ['09:30 AM', '02:00 PM']
    assert '11:00 AM' in response.available
    assert len(response.available) == len(config.SLOT_CATALOGUE) - 2


def test_list_slots_keeps_unreadable_stored_label_last(store, appointment_db, skip_schema_check) -> None:
    reservations.create_appointment(store, 'Luis', '5555-1234', '2024-06-01', '02:00 PM')
    store.insert({
        'client_name': 'Walk-in',
        'phone': '3333-0000',
        'date': '2024-06-01',
        'time': 'after lunch',
        'status': 'confirmed',
    })

    response = list_slots(date='2024-06-01', db=appointment_db)

    assert response.occupied == ['02:00 PM', 'after lunch']
    assert '02:00 PM' not in response.available
    assert len(response.available) == len(config.SLOT_CATALOGUE) - 1


def test_appointment_response_reads_from_attributes() -> None:
    record = SimpleNamespace(
        id='abc',
        client_name='Luis',
        phone='5555-1234',
        date='2024-06-01',
        time='10:00 AM',
        status='cancelled',
        cancellation_reason='no-show',
        created_at=None,
    )

    response = AppointmentResponse.model_validate(record)

    assert response.cancellation_reason == 'no-show'
    assert AppointmentResponse.model_config['from_attributes'] is True


def test_list_slots_rejects_malformed_date(appointment_db, skip_schema_check) -> None:
    with pytest.raises(HTTPException) as exception_info:
        list_slots(date='June 1st', db=appointment_db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Invalid date. Use YYYY-MM-DD.'


def test_book_appointment_returns_confirmed_booking_with_message_link(
    appointment_db,
    skip_schema_check,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(config, 'BARBER_WHATSAPP_NUMBER', '+502 5692-7575')

    response = book_appointment(_request(), db=appointment_db)

    assert response.id
    assert response.status == 'confirmed'
    assert response.message_link.startswith('https://wa.me/50256927575?text=')


def test_book_appointment_succeeds_without_message_link(
    appointment_db,
    skip_schema_check,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(config, 'BARBER_WHATSAPP_NUMBER', '')

    response = book_appointment(_request(), db=appointment_db)

    assert response.status == 'confirmed'
    assert response.message_link is None


def test_book_appointment_returns_conflict_for_taken_slot(appointment_db, skip_schema_check) -> None:
    book_appointment(_request(), db=appointment_db)

    with pytest.raises(HTTPException) as exception_info:
        book_appointment(_request(client_name='Pedro', phone='5555-9999'), db=appointment_db)

    assert exception_info.value.status_code == 409
    assert exception_info.value.detail == 'This time slot was just taken. Please choose another one.'


def test_book_appointment_rejects_past_dates(appointment_db, skip_schema_check) -> None:
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    with pytest.raises(HTTPException) as exception_info:
        book_appointment(_request(date=yesterday), db=appointment_db)

    assert exception_info.value.status_code == 400
    assert exception_info.value.detail == 'Appointments cannot be booked for past dates.'


def test_book_appointment_reports_unavailable_store(
    appointment_db,
    skip_schema_check,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def unavailable(*_args, **_kwargs):
        raise StoreUnavailableError('Could not insert appointment.')

    monkeypatch.setattr(reservations, 'create_appointment', unavailable)

    with pytest.raises(HTTPException) as exception_info:
        book_appointment(_request(), db=appointment_db)

    assert exception_info.value.status_code == 503
