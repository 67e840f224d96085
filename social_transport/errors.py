"""Error taxonomy shared by services and the REST layer.

Every error carries the HTTP status it maps to. Messages are returned to the
caller verbatim, except for :class:`InternalError`, whose detail is only
logged.
"""
from typing import List, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400


class ConflictError(AppError):
    """Uniqueness violation."""

    status_code = 400


class AuthError(AppError):
    """Bad credentials, or an expired, invalid or unapproved session."""

    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class PartialFailureError(AppError):
    """A recurring expansion failed part way through.

    ``created_ids`` lists the occurrences written before the failure. When
    ``rolled_back`` is true those rows were discarded with the transaction.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        created_ids: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
        rolled_back: bool = True,
    ):
        super().__init__(message)
        self.created_ids = list(created_ids or [])
        self.cause = cause
        self.rolled_back = rolled_back


class InternalError(AppError):
    status_code = 500

    PUBLIC_MESSAGE = "Internal server error"
