"""
Domain error hierarchy.

Services raise these errors with the user-facing (Korean) message; the server's
exception handler turns them into ``{"error": message}`` responses with the
matching HTTP status code.
"""

from typing import Any, Optional


class AdvisorError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra


class BadRequestError(AdvisorError):
    status_code = 400


class AuthenticationError(AdvisorError):
    status_code = 401

    def __init__(self, message: str = "인증이 필요합니다", **extra: Any) -> None:
        super().__init__(message, **extra)


class PermissionDeniedError(AdvisorError):
    status_code = 403

    def __init__(self, message: str = "관리자 권한이 필요합니다", **extra: Any) -> None:
        super().__init__(message, **extra)


class NotFoundError(AdvisorError):
    status_code = 404


class ConflictError(AdvisorError):
    status_code = 409


class QuotaExceededError(PermissionDeniedError):
    """Raised when a group policy limit is reached for the current billing period."""


class InsufficientCreditsError(BadRequestError):
    def __init__(self, message: str = "크레딧이 부족합니다", **extra: Any) -> None:
        super().__init__(message, **extra)


class AIServiceError(AdvisorError):
    """A Gemini call failed or returned an unusable result."""

    status_code = 500


class StorageError(AdvisorError):
    status_code = 500
