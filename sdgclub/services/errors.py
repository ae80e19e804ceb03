"""
Domain errors raised by the service layer and rendered by the routers
"""

from typing import Any, Optional


class ClubError(Exception):
    """Base class for user-facing failures.

    Every failure in the portal returns the user to a retryable state, so
    none of these are fatal: they carry a friendly message, a stable code the
    front end can switch on, and the HTTP status to answer with.
    """

    status_code = 400
    error_code = "ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class OperationFailed(ClubError):
    status_code = 500
    error_code = "OPERATION_FAILED"


class NotFoundError(ClubError):
    status_code = 404
    error_code = "NOT_FOUND"


class ConflictError(ClubError):
    status_code = 409
    error_code = "CONFLICT"


class AlreadyRegistered(ConflictError):
    error_code = "ALREADY_REGISTERED"

    def __init__(self, message: str = "You have already registered for this event."):
        super().__init__(message)


class DuplicateMatricNumber(ConflictError):
    error_code = "DUPLICATE_MATRIC"

    def __init__(self, message: str = "A member with this matric number is already registered."):
        super().__init__(message)


class EventFull(ConflictError):
    error_code = "FULLY_BOOKED"

    def __init__(self, message: str = "Fully Booked"):
        super().__init__(message)


class RegistrationClosed(ClubError):
    error_code = "REGISTRATION_CLOSED"


class InvalidQRCode(ClubError):
    error_code = "INVALID_QR_CODE"

    def __init__(self, message: str = "Invalid QR Code", details: Optional[Any] = None):
        super().__init__(message, details)


class MemberNotFound(NotFoundError):
    error_code = "MEMBER_NOT_FOUND"

    def __init__(self, message: str = "This QR code doesn't match any registered member"):
        super().__init__(message)


class AlreadyCheckedIn(ConflictError):
    error_code = "ALREADY_CHECKED_IN"


class InvalidRegistrationLink(ClubError):
    status_code = 403
    error_code = "INVALID_REGISTRATION_LINK"

    def __init__(self, message: str = "This registration link is invalid or no longer active"):
        super().__init__(message)


class AuthenticationFailed(ClubError):
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class EmailNotConfigured(ClubError):
    status_code = 503
    error_code = "EMAIL_NOT_CONFIGURED"


class EmailDeliveryFailed(ClubError):
    status_code = 502
    error_code = "EMAIL_FAILED"
