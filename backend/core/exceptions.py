"""
Error taxonomy for booking operations.
Routes translate these into HTTP responses at the boundary of each action.
"""


class BookingError(Exception):
    """Base exception for booking operations."""

    pass


class SlotConflictError(BookingError):
    """Raised when the slot already has a confirmed appointment."""

    def __init__(self, date: str, time: str):
        super().__init__(f"Slot {date} {time} is already booked.")
        self.date = date
        self.time = time


class AppointmentNotFoundError(BookingError):
    """Raised when an appointment id does not exist."""

    def __init__(self, appointment_id: str):
        super().__init__(f"Appointment {appointment_id} not found.")
        self.appointment_id = appointment_id


class StoreUnavailableError(BookingError):
    """Raised when the appointment store cannot be reached."""

    pass
