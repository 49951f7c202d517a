"""
Admin list aggregation.

Pure functions over appointment-like objects (anything exposing
``client_name``, ``phone``, ``date``, ``time`` and ``status``). Dates are
zero-padded ISO strings, so plain string comparison orders them correctly.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Sequence

from backend.models.appointment import STATUS_CANCELLED


def time_rank(time_label: str) -> int:
    """Sort key for a slot label: ``hours * 100 + minutes`` on a 24-hour clock.

    Accepts ``"hh:mm AM"``/``"hh:mm PM"`` and ``"HH:MM"``. ``12 AM`` is hour 0
    and ``12 PM`` stays hour 12.
    """
    label = time_label.strip().upper()
    meridiem = None
    if label.endswith(('AM', 'PM')):
        meridiem = label[-2:]
        label = label[:-2].strip()

    hours_text, separator, minutes_text = label.partition(':')
    if not separator:
        raise ValueError(f'Invalid time label: {time_label!r}')
    hours = int(hours_text)
    minutes = int(minutes_text)

    if not 0 <= minutes <= 59:
        raise ValueError(f'Invalid time label: {time_label!r}')
    if meridiem is None:
        if not 0 <= hours <= 23:
            raise ValueError(f'Invalid time label: {time_label!r}')
    elif not 1 <= hours <= 12:
        raise ValueError(f'Invalid time label: {time_label!r}')

    if meridiem == 'AM' and hours == 12:
        hours = 0
    elif meridiem == 'PM' and hours != 12:
        hours += 12

    return hours * 100 + minutes


UNPARSEABLE_TIME_RANK = 10000


def slot_sort_key(time_label: str) -> tuple[int, str]:
    """Like ``time_rank`` but never raises; unreadable labels sort last, by text."""
    try:
        return time_rank(time_label), ''
    except (AttributeError, ValueError):
        return UNPARSEABLE_TIME_RANK, str(time_label)


def sort_appointments(appointments: Iterable[Any]) -> list[Any]:
    return sorted(appointments, key=lambda appointment: (appointment.date, slot_sort_key(appointment.time)))


def group_by_date(appointments: Iterable[Any]) -> dict[str, list[Any]]:
    groups: dict[str, list[Any]] = {}
    for appointment in appointments:
        groups.setdefault(appointment.date, []).append(appointment)
    return groups


def partition_past_future(date_keys: Iterable[str], today: str) -> tuple[list[str], list[str]]:
    future: list[str] = []
    past: list[str] = []
    for date_key in date_keys:
        if date_key >= today:
            future.append(date_key)
        else:
            past.append(date_key)
    return future, past


def filter_by_search(appointments: Sequence[Any], query: str) -> Sequence[Any]:
    # Phone numbers are matched as typed; only names are case-folded.
    if not query or not query.strip():
        return appointments

    needle = query.strip()
    folded = needle.casefold()
    return [
        appointment
        for appointment in appointments
        if folded in (appointment.client_name or '').casefold() or needle in (appointment.phone or '')
    ]


def is_cancelled(appointment: Any) -> bool:
    return appointment.status == STATUS_CANCELLED


def count_active_on(appointments: Iterable[Any], day: str) -> int:
    return sum(1 for appointment in appointments if appointment.date == day and not is_cancelled(appointment))


def count_active(appointments: Iterable[Any]) -> int:
    return sum(1 for appointment in appointments if not is_cancelled(appointment))


def count_cancelled(appointments: Iterable[Any]) -> int:
    return sum(1 for appointment in appointments if is_cancelled(appointment))


@dataclass(frozen=True)
class SearchSummary:
    total: int
    cancelled: int
    effective: int


def summarize_search(appointments: Sequence[Any], query: str) -> SearchSummary:
    matches = filter_by_search(appointments, query)
    total = len(matches)
    cancelled = count_cancelled(matches)
    return SearchSummary(total=total, cancelled=cancelled, effective=total - cancelled)


@dataclass(frozen=True)
class AdminViewState:
    """What the admin has typed and toggled; never mutated in place."""

    search: str = ''
    show_past: bool = False
    expanded_dates: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_searching(self) -> bool:
        return bool(self.search.strip())


def toggle_date(state: AdminViewState, date: str) -> AdminViewState:
    return replace(state, expanded_dates=state.expanded_dates ^ {date})


@dataclass(frozen=True)
class DateGroup:
    date: str
    appointments: list[Any]
    is_past: bool
    is_today: bool
    expanded: bool


@dataclass(frozen=True)
class AdminView:
    groups: list[DateGroup]
    upcoming_dates: list[str]
    past_dates: list[str]
    today_active: int
    active: int
    cancelled: int
    search: SearchSummary | None = None


def build_admin_view(appointments: Iterable[Any], state: AdminViewState, today: str) -> AdminView:
    """Sort, filter, group and partition the full list for the admin screen.

    While searching, every date with a match is shown expanded, past dates
    included. Otherwise past dates are shown only with ``show_past`` and a
    group is expanded when its date is in ``expanded_dates``.
    """
    ordered = sort_appointments(appointments)
    visible = filter_by_search(ordered, state.search)
    grouped = group_by_date(visible)
    upcoming_dates, past_dates = partition_past_future(sorted(grouped), today)

    if state.is_searching or state.show_past:
        shown_dates = past_dates + upcoming_dates
    else:
        shown_dates = upcoming_dates

    groups = [
        DateGroup(
            date=date_key,
            appointments=grouped[date_key],
            is_past=date_key < today,
            is_today=date_key == today,
            expanded=state.is_searching or date_key in state.expanded_dates,
        )
        for date_key in shown_dates
    ]

    return AdminView(
        groups=groups,
        upcoming_dates=upcoming_dates,
        past_dates=past_dates,
        today_active=count_active_on(ordered, today),
        active=count_active(ordered),
        cancelled=count_cancelled(ordered),
        search=summarize_search(ordered, state.search) if state.is_searching else None,
    )
