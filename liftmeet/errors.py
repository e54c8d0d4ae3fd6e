"""
Error types raised by the scheduling and scoring services.
Route handlers turn these into the {success, error} JSON envelope.
"""


class LiftMeetError(Exception):
    """Base error carrying the HTTP status the transport should use."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationRequired(LiftMeetError):
    status_code = 401


class NotFound(LiftMeetError):
    status_code = 404


class ValidationError(LiftMeetError):
    status_code = 400


class ConflictError(LiftMeetError):
    status_code = 409
