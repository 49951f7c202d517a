import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth.dependencies import require_admin
from backend.core.exceptions import AppointmentNotFoundError, StoreUnavailableError
from backend.routes.common import (
    APPOINTMENT_NOT_FOUND_DETAIL,
    AppointmentResponse,
    database_unavailable,
    ensure_database_ready,
    get_db,
    parse_date_param,
    today_iso,
)
from backend.services import reservations
from backend.services.aggregation import AdminView, AdminViewState, build_admin_view
from backend.store.appointment_store import AppointmentStore

router = APIRouter(tags=['admin'])

logger = logging.getLogger(__name__)

MAX_CANCELLATION_REASON_LENGTH = 300


class CancelAppointmentRequest(BaseModel):
    reason: str | None = None

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_CANCELLATION_REASON_LENGTH:
            raise ValueError(f'Reason must be {MAX_CANCELLATION_REASON_LENGTH} characters or fewer.')

        return normalized


class DateGroupResponse(BaseModel):
    date: str
    is_past: bool
    is_today: bool
    expanded: bool
    appointments: list[AppointmentResponse]


class AppointmentCountsResponse(BaseModel):
    today_active: int
    active: int
    cancelled: int


class SearchSummaryResponse(BaseModel):
    query: str
    total: int
    cancelled: int
    effective: int


class AdminAppointmentsResponse(BaseModel):
    today: str
    groups: list[DateGroupResponse]
    upcoming_dates: list[str]
    past_dates: list[str]
    counts: AppointmentCountsResponse
    search: SearchSummaryResponse | None = None


def to_admin_response(view: AdminView, state: AdminViewState, today: str) -> AdminAppointmentsResponse:
    search = None
    if view.search is not None:
        search = SearchSummaryResponse(
            query=state.search.strip(),
            total=view.search.total,
            cancelled=view.search.cancelled,
            effective=view.search.effective,
        )

    return AdminAppointmentsResponse(
        today=today,
        groups=[
            DateGroupResponse(
                date=group.date,
                is_past=group.is_past,
                is_today=group.is_today,
                expanded=group.expanded,
                appointments=[AppointmentResponse.model_validate(appointment) for appointment in group.appointments],
            )
            for group in view.groups
        ],
        upcoming_dates=view.upcoming_dates,
        past_dates=view.past_dates,
        counts=AppointmentCountsResponse(
            today_active=view.today_active,
            active=view.active,
            cancelled=view.cancelled,
        ),
        search=search,
    )


@router.get('/appointments', response_model=AdminAppointmentsResponse)
def list_appointments(
    search: str = Query(default=''),
    show_past: bool = Query(default=False),
    expanded: list[str] = Query(default=[]),
    today: str | None = Query(default=None),
    admin: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    reference_day = parse_date_param(today, 'today') if today else today_iso()
    state = AdminViewState(
        search=search,
        show_past=show_past,
        expanded_dates=frozenset(expanded),
    )

    ensure_database_ready()

    try:
        appointments = AppointmentStore(db).query(order_by=('date', 'time'))
    except StoreUnavailableError as exc:
        raise database_unavailable() from exc

    logger.debug('Admin %s loaded %d appointments', admin['sub'], len(appointments))
    view = build_admin_view(appointments, state, reference_day)
    return to_admin_response(view, state, reference_day)


@router.post('/appointments/{appointment_id}/cancel', response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: str,
    data: CancelAppointmentRequest,
    admin: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    store = AppointmentStore(db)
    try:
        reservations.cancel_appointment(store, appointment_id, data.reason)
        appointment = store.query({'id': appointment_id})[0]
    except AppointmentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=APPOINTMENT_NOT_FOUND_DETAIL,
        ) from exc
    except StoreUnavailableError as exc:
        raise database_unavailable() from exc

    logger.info('Admin %s cancelled appointment %s', admin['sub'], appointment_id)
    return appointment


@router.delete('/appointments/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_appointment(
    appointment_id: str,
    admin: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        reservations.delete_appointment(AppointmentStore(db), appointment_id)
    except AppointmentNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=APPOINTMENT_NOT_FOUND_DETAIL,
        ) from exc
    except StoreUnavailableError as exc:
        raise database_unavailable() from exc

    logger.warning('Admin %s permanently deleted appointment %s', admin['sub'], appointment_id)
