class ScheduleError(Exception):
    """Base class for recoverable scheduling errors surfaced to the caller."""

    reason = "ScheduleError"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__


class ValidationFailed(ScheduleError, ValueError):
    """The proposed interval or break is invalid."""

    reason = "ValidationFailed"


class OutOfBusinessHours(ValidationFailed):
    """The interval lies outside business hours."""

    reason = "OutOfBusinessHours"


class InvertedInterval(ValidationFailed):
    """The end time must be after the start time."""

    reason = "InvertedInterval"


class MisalignedInterval(ValidationFailed):
    """The interval is not aligned to the time grid."""

    reason = "MisalignedInterval"


class MissingInterval(ValidationFailed):
    """Start and end times are required for this status."""

    reason = "MissingInterval"


class InvalidBreakDuration(ValidationFailed):
    """The break duration is not one of the allowed options."""

    reason = "InvalidBreakDuration"


class BreakExceedsShift(ValidationFailed):
    """The break is as long as or longer than the shift."""

    reason = "BreakExceedsShift"


class DateOutsidePeriod(ValidationFailed):
    """The date is outside the scheduling period."""

    reason = "DateOutsidePeriod"


class DuplicateAssignment(ScheduleError):
    """The staff member already has a shift on this date."""

    reason = "DuplicateAssignment"


class NotFound(ScheduleError):
    """The requested record does not exist."""

    reason = "NotFound"


class PeriodClosed(ScheduleError):
    """The period no longer accepts availability."""

    reason = "PeriodClosed"


class Forbidden(ScheduleError):
    """The caller is not allowed to perform this operation."""

    reason = "Forbidden"


class Unauthenticated(ScheduleError):
    """Authentication is required."""

    reason = "Unauthenticated"


# Mapping of scheduling errors to HTTP status codes; subclasses inherit
# their parent's status through the MRO lookup in ``status_for``.
ERROR_STATUS = {
    ValidationFailed: 400,
    DuplicateAssignment: 400,
    PeriodClosed: 400,
    NotFound: 404,
    Forbidden: 403,
    Unauthenticated: 401,
}


def status_for(error: ScheduleError) -> int:
    for klass in type(error).__mro__:
        if klass in ERROR_STATUS:
            return ERROR_STATUS[klass]
    return 500
