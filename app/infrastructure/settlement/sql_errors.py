"""
Translation of SQLAlchemy failures into settlement domain errors.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.domain.settlement.errors import ConstraintViolationError, ServiceUnavailableError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(operation: str) -> Iterator[None]:
    """Re-raise database errors from ``operation`` as domain errors.

    IntegrityError becomes ConstraintViolationError, anything else from
    SQLAlchemy becomes ServiceUnavailableError.
    """
    try:
        yield
    except IntegrityError as exc:
        logger.warning("Constraint violated during %s: %s", operation, exc.orig)
        raise ConstraintViolationError(f"{operation} violates a uniqueness or reference constraint") from exc
    except SQLAlchemyError as exc:
        logger.error("Database failure during %s: %s", operation, exc)
        raise ServiceUnavailableError("database", operation) from exc
