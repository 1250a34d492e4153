"""
Domain errors raised by the service layer.

Each error carries the HTTP status the API layer answers with; the handlers
registered in ``main.py`` render them as ``{"error": message}``.
"""


class ServiceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None, status_code: int = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInputError(ServiceError):
    status_code = 400
    default_message = "Invalid input"


class MissingFieldsError(InvalidInputError):
    default_message = "Missing required fields"


class SelfReferralError(InvalidInputError):
    default_message = "You cannot use your own referral code"


class SignatureMismatchError(InvalidInputError):
    default_message = "Payment signature verification failed"


class UnauthorizedError(ServiceError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ServiceError):
    status_code = 409
    default_message = "Conflict"


class AlreadyEnrolledError(ConflictError):
    default_message = "You already own this course"


class InternalError(ServiceError):
    status_code = 500
