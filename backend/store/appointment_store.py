"""
Appointment store backed by a SQLAlchemy session.

Exposes the four primitives the booking services rely on: insert, query,
update and delete. Writes commit immediately, so each call is atomic for a
single row and nothing spans more than one call.

The partial unique index on (date, time) for confirmed rows turns ``insert``
into a conditional write: a second confirmed row for the same slot is
rejected by the database and surfaces as ``SlotConflictError``.
"""

import logging
from typing import Any, Iterable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.core.exceptions import SlotConflictError, StoreUnavailableError
from backend.models.appointment import STATUS_CONFIRMED, Appointment

logger = logging.getLogger(__name__)

QUERYABLE_FIELDS = frozenset(column.name for column in Appointment.__table__.columns)


def _validate_fields(fields: Iterable[str]) -> None:
    unknown = sorted(set(fields) - QUERYABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown appointment fields: {', '.join(unknown)}")


class AppointmentStore:
    """Thin document-style wrapper over the appointments table."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, fields: dict[str, Any]) -> str:
        """Insert a row and return its generated id."""
        _validate_fields(fields)
        appointment = Appointment(**fields)
        try:
            self.db.add(appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except IntegrityError as exc:
            self.db.rollback()
            if self._is_slot_conflict(fields):
                logger.warning(
                    "Rejected insert for %s %s: slot already has a confirmed appointment",
                    fields.get("date"),
                    fields.get("time"),
                )
                raise SlotConflictError(fields["date"], fields["time"]) from exc
            logger.exception("Insert violated an appointment constraint")
            raise ValueError(f"Appointment violates a database constraint: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to insert appointment")
            raise StoreUnavailableError("Could not insert appointment.") from exc

        return appointment.id

    def _is_slot_conflict(self, fields: dict[str, Any]) -> bool:
        # Only the confirmed-slot unique index makes an insert a conflict.
        if fields.get("status", STATUS_CONFIRMED) != STATUS_CONFIRMED:
            return False
        if not fields.get("date") or not fields.get("time"):
            return False
        return bool(self.query({"date": fields["date"], "time": fields["time"], "status": STATUS_CONFIRMED}))

    def query(
        self,
        filters: dict[str, Any] | None = None,
        order_by: tuple[str, ...] = (),
    ) -> list[Appointment]:
        """Return rows matching every equality filter, optionally ordered ascending."""
        filters = filters or {}
        _validate_fields(filters)
        _validate_fields(order_by)

        try:
            statement = self.db.query(Appointment)
            for field_name, value in filters.items():
                statement = statement.filter(getattr(Appointment, field_name) == value)
            if order_by:
                statement = statement.order_by(*(getattr(Appointment, name).asc() for name in order_by))
            return statement.all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to query appointments with filters %s", filters)
            raise StoreUnavailableError("Could not query appointments.") from exc

    def update(self, appointment_id: str, fields: dict[str, Any]) -> bool:
        """Apply a partial update. Returns False when the id does not exist."""
        _validate_fields(fields)
        try:
            appointment = self.db.get(Appointment, appointment_id)
            if appointment is None:
                return False

            for field_name, value in fields.items():
                setattr(appointment, field_name, value)
            self.db.commit()
            return True
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to update appointment %s", appointment_id)
            raise StoreUnavailableError("Could not update appointment.") from exc

    def delete(self, appointment_id: str) -> bool:
        """Physically remove a row. Returns False when the id does not exist."""
        try:
            appointment = self.db.get(Appointment, appointment_id)
            if appointment is None:
                return False

            self.db.delete(appointment)
            self.db.commit()
            return True
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to delete appointment %s", appointment_id)
            raise StoreUnavailableError("Could not delete appointment.") from exc
