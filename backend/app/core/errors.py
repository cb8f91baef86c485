# backend/app/core/errors.py
"""
Error kinds raised by the service layer.

Every failure that crosses the service boundary is one of these. The HTTP
layer maps them to status codes through a single exception handler
(see backend/app/main.py); storage and crypto details never leak into
`detail`.
"""
import functools
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class NotoraError(Exception):
    status_code: int = 500
    default_detail: str = "internal error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ConflictError(NotoraError):
    status_code = 409
    default_detail = "email already registered"


class InvalidCredentialsError(NotoraError):
    # Same error for unknown email and wrong password
    status_code = 401
    default_detail = "invalid credentials"


class AccountNotApprovedError(NotoraError):
    status_code = 403
    default_detail = "account not approved"


class AccountSuspendedError(NotoraError):
    status_code = 403
    default_detail = "account suspended"


class InvalidOrExpiredTokenError(NotoraError):
    # Covers unknown, expired, revoked and already-used tokens alike
    status_code = 401
    default_detail = "invalid or expired token"


class ForbiddenError(NotoraError):
    status_code = 403
    default_detail = "not allowed"


class NotFoundError(NotoraError):
    status_code = 404
    default_detail = "not found"


class StorageError(NotoraError):
    status_code = 500
    default_detail = "storage error"


def wraps_storage_errors(func):
    """
    Decorator for async service methods of objects holding `self.db`.

    Rolls back the session and re-raises SQLAlchemy failures as StorageError.
    """

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except SQLAlchemyError as ex:
            await self.db.rollback()
            logger.exception("storage failure in %s", func.__qualname__)
            raise StorageError() from ex

    return wrapper
