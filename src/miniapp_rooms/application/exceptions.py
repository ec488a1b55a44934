from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class StorageError(AppError):
    """The store was unavailable or refused a write."""


class ConfigurationError(AppError):
    """Fatal misconfiguration; the process must not serve traffic."""


class AuthError(AppError):
    """Base for launch-data authentication failures."""


class MalformedInputError(AuthError):
    pass


class InvalidSignatureError(AuthError):
    pass


class ExpiredLaunchDataError(AuthError):
    pass


class MissingIdentityError(AuthError):
    pass
