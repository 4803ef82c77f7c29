"""Domain error kinds raised by the service layer.

Each error carries the HTTP status the API layer answers with; the single
handler registered in ``confhub.main`` renders them as
``{"detail": ..., "error": <kind>}``.
"""


class ConferenceError(Exception):
    """Base class for all recoverable, operation-local failures."""

    status_code = 400
    kind = "error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(ConferenceError):
    status_code = 404
    kind = "not_found"


class InvalidTransition(ConferenceError):
    status_code = 409
    kind = "invalid_transition"


class Forbidden(ConferenceError):
    status_code = 403
    kind = "forbidden"


class Unauthorized(ConferenceError):
    status_code = 401
    kind = "unauthorized"


class DuplicateRequest(ConferenceError):
    status_code = 409
    kind = "duplicate_request"


class ValidationError(ConferenceError):
    status_code = 422
    kind = "validation_error"


class Conflict(ConferenceError):
    status_code = 409
    kind = "conflict"
