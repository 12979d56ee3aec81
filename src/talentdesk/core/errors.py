from __future__ import annotations


class ServiceError(ValueError):
    """Domain failure that already knows the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(ServiceError):
    status_code = 400


class AuthenticationFailed(ServiceError):
    status_code = 401


class PermissionDenied(ServiceError):
    status_code = 403


class ResourceNotFound(ServiceError):
    status_code = 404
