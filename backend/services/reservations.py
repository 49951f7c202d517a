"""
Slot availability and reservation logic.

``create_appointment`` checks the slot first and then inserts. The two steps
are separate store calls, so two clients can both pass the check; the store's
partial unique index on confirmed (date, time) rejects the later insert, which
is reported as the same ``SlotConflictError`` the check raises.
"""

import logging

from backend.core import config
from backend.core.exceptions import AppointmentNotFoundError, SlotConflictError
from backend.models.appointment import STATUS_CANCELLED, STATUS_CONFIRMED
from backend.store.appointment_store import AppointmentStore

logger = logging.getLogger(__name__)


def list_occupied_slots(store: AppointmentStore, date: str) -> set[str]:
    appointments = store.query({'date': date})
    return {
        appointment.time
        for appointment in appointments
        if appointment.status != STATUS_CANCELLED
    }


def available_slots(catalogue: tuple[str, ...], occupied: set[str]) -> list[str]:
    return [slot for slot in catalogue if slot not in occupied]


def list_available_slots(store: AppointmentStore, date: str, catalogue: tuple[str, ...]) -> list[str]:
    return available_slots(catalogue, list_occupied_slots(store, date))


def is_slot_taken(store: AppointmentStore, date: str, time: str) -> bool:
    appointments = store.query({'date': date, 'time': time})
    return any(appointment.status == STATUS_CONFIRMED for appointment in appointments)


def create_appointment(store: AppointmentStore, client_name: str, phone: str, date: str, time: str) -> str:
    if is_slot_taken(store, date, time):
        logger.warning('Slot %s %s already booked; rejecting request from %s', date, time, client_name)
        raise SlotConflictError(date, time)

    appointment_id = store.insert({
        'client_name': client_name,
        'phone': phone,
        'date': date,
        'time': time,
        'status': STATUS_CONFIRMED,
    })
    logger.info('Booked %s %s as appointment %s', date, time, appointment_id)
    return appointment_id


def cancel_appointment(store: AppointmentStore, appointment_id: str, reason: str | None = None) -> None:
    normalized_reason = (reason or '').strip() or config.DEFAULT_CANCELLATION_REASON

    updated = store.update(appointment_id, {
        'status': STATUS_CANCELLED,
        'cancellation_reason': normalized_reason,
    })
    if not updated:
        raise AppointmentNotFoundError(appointment_id)

    logger.info('Cancelled appointment %s (%s)', appointment_id, normalized_reason)


def delete_appointment(store: AppointmentStore, appointment_id: str) -> None:
    if not store.delete(appointment_id):
        raise AppointmentNotFoundError(appointment_id)

    logger.info('Deleted appointment %s', appointment_id)
