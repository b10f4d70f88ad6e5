"""Typed store errors

Repositories raise these instead of leaking SQLAlchemy exceptions, so the
service layer can tell a missing row from a constraint violation from a
database outage.
"""

import enum
from typing import Optional

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError


class StoreErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    CONNECTIVITY = "connectivity"


class StoreError(Exception):
    kind: StoreErrorKind

    def __init__(self, message: str, *, entity: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity


class NotFoundError(StoreError):
    kind = StoreErrorKind.NOT_FOUND


class ConstraintViolation(StoreError):
    kind = StoreErrorKind.CONSTRAINT_VIOLATION


class StoreUnavailable(StoreError):
    kind = StoreErrorKind.CONNECTIVITY


HTTP_STATUS_BY_KIND = {
    StoreErrorKind.NOT_FOUND: 404,
    StoreErrorKind.CONSTRAINT_VIOLATION: 409,
    StoreErrorKind.CONNECTIVITY: 503,
}


def translate_db_error(exc: Exception, entity: Optional[str] = None) -> StoreError:
    """Map a SQLAlchemy exception onto a store error kind"""
    if isinstance(exc, StoreError):
        return exc
    if isinstance(exc, IntegrityError):
        return ConstraintViolation(f"{entity or 'Record'} conflicts with existing data", entity=entity)
    if isinstance(exc, (OperationalError, InterfaceError)):
        return StoreUnavailable("Database is unavailable", entity=entity)
    raise exc
