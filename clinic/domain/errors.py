"""Exception hierarchy for record store workflows."""


class ClinicError(Exception):
    """Base exception for clinic record operations."""


class ValidationError(ClinicError):
    """Raised when a required field is empty, a reference cannot be resolved or a number is out of range."""


class NotFoundError(ClinicError):
    """Raised when an operation targets an id that is not in the collection."""


class InvalidTransitionError(ClinicError):
    """Raised when a status change is attempted on a terminal appointment."""


class MalformedRecordError(ClinicError):
    """Raised when a serialized line has too few fields or a bad value. Never leaves the codec/restore path."""
