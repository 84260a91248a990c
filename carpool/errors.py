"""
Domain errors raised by the services.

Each error carries the HTTP status it is rendered with; the handler
registered in ``carpool.main`` turns them into ``{"message": ...}`` bodies.
"""
from fastapi import status


class CarpoolError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CarpoolError):
    default_message = "Invalid input"


class Conflict(CarpoolError):
    default_message = "Resource already exists"


class InvalidCredentials(CarpoolError):
    default_message = "Invalid email or password"


class InvalidRequest(CarpoolError):
    default_message = "Invalid request"


class SelfBookingDenied(CarpoolError):
    default_message = "You cannot book your own ride"


class AlreadyBooked(CarpoolError):
    default_message = "Already booked this ride"


class RideNotActive(CarpoolError):
    default_message = "Ride is no longer active"


class InsufficientSeats(CarpoolError):
    def __init__(self, remaining: int):
        self.remaining = remaining
        if remaining <= 0:
            message = "No seats available"
        else:
            message = f"Only {remaining} seat(s) remaining"
        super().__init__(message)


class Unauthorized(CarpoolError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token."


class Expired(Unauthorized):
    default_message = "Token expired. Please login again."


class Forbidden(CarpoolError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(CarpoolError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"
