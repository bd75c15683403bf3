from fastapi import status


class HangoutzError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HangoutzError):
    status_code = status.HTTP_400_BAD_REQUEST


class GeofenceError(ValidationError):
    """Raised when an event location falls outside the allowed city radius."""

    def __init__(self, message: str, distance_km: float):
        super().__init__(message)
        self.distance_km = distance_km


class AuthenticationError(HangoutzError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(HangoutzError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(HangoutzError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(HangoutzError):
    status_code = status.HTTP_409_CONFLICT


class UpstreamError(HangoutzError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
