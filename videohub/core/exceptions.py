"""
Service-level errors.

Services raise these instead of HTTPException so they stay usable outside a
request; the handler registered in main.py turns them into JSON responses.
"""
from typing import Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors surfaced to the caller as a message and status."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class UploadError(ServiceError):
    """The media hosting provider failed or could not be reached."""

    status_code = status.HTTP_502_BAD_GATEWAY
