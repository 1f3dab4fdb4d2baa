from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    ``retryable`` tells the caller whether trying again may succeed;
    ``transient`` errors are shown briefly and dismissed automatically.
    """

    code = "domain_error"
    message = "Request could not be completed."
    retryable = False
    transient = False

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    message = "Invalid input."


class Unauthenticated(DomainError):
    code = "unauthenticated"
    message = "Login required. Please sign in again."
    retryable = True


class AlreadyCompletedToday(DomainError):
    """Terminal for the day: time in/out already recorded."""

    code = "already_completed_today"
    message = "You already completed time in/out for today."


class SessionAlreadyOpen(DomainError):
    code = "session_already_open"
    message = "You already have an active time-in record. Please time out first."


class NoOpenSession(DomainError):
    code = "no_open_session"
    message = "No active time-in record found. Please time in first."
    retryable = True


class LocationUnavailable(DomainError):
    code = "location_unavailable"
    message = "Location required to time in. Please enable location and try again."
    retryable = True
    transient = True


class Forbidden(DomainError):
    code = "forbidden"
    message = "You do not have access to this page."


class OutOfRange(DomainError):
    code = "out_of_range"
    retryable = True
    transient = True

    def __init__(self, distance_meters: float):
        self.distance_meters = float(distance_meters)
        super().__init__(
            "You must be at the office location to time in. "
            f"Detected distance: {self.distance_meters:.0f}m."
        )


class OperationInProgress(DomainError):
    code = "operation_in_progress"
    message = "Another attendance update is still being saved. Please wait."
    retryable = True
    transient = True


class NoteAlreadySaved(DomainError):
    code = "note_already_saved"
    message = "Today's note is already saved. Edit it from the calendar."


class StoreError(DomainError):
    retryable = True
    transient = True


class StoreReadFailed(StoreError):
    code = "store_read_failed"
    message = "Unable to load attendance records."


class StoreWriteFailed(StoreError):
    code = "store_write_failed"
    message = "Failed to save attendance record."
