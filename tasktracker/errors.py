# tasktracker/errors.py
"""
Domain errors.

Every error carries a stable machine-readable ``kind``, a human-readable
``message`` and the HTTP status the web layer maps it to. Messages must never
contain password hashes or tokens.
"""

from fastapi import status


class TaskTrackerError(Exception):
    kind = "InternalError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(TaskTrackerError):
    kind = "ValidationError"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class DuplicateError(TaskTrackerError):
    kind = "DuplicateError"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class Unauthorized(TaskTrackerError):
    kind = "Unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class InvalidCredentials(Unauthorized):
    kind = "InvalidCredentials"
    default_message = "Invalid email or password"


class Forbidden(TaskTrackerError):
    kind = "Forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You don't have permission to perform this action"


class NotFoundError(TaskTrackerError):
    kind = "NotFoundError"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InternalError(TaskTrackerError):
    pass
