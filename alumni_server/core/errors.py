# alumni_server/core/errors.py

from fastapi import status


class AlumniError(Exception):
    """
    Base class for business-rule failures. Each subclass maps to one HTTP status;
    the message is safe to show to clients.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AlumniError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(AlumniError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AlumniError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AlumniError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AlumniError):
    status_code = status.HTTP_409_CONFLICT


class InvalidState(AlumniError):
    status_code = status.HTTP_400_BAD_REQUEST
