"""Error taxonomy shared by services and the HTTP layer.

Every error is an ``HTTPException`` so routers can let it propagate untouched;
``main.py`` renders them as ``{"message": ...}``.
"""
from typing import Dict, Optional

from fastapi import HTTPException, status


class PortalError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=message or self.default_message, headers=headers)

    @property
    def message(self) -> str:
        return self.detail


class InvalidInputError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class InvalidCredentialsError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid credentials"


class UnauthenticatedError(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(PortalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"
