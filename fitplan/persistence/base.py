"""Transaction boundary and error translation for repositories.

Repositories only flush; a unit of work commits once at the end so
multi-step writes (delete-then-insert schedule replacement, week pointer
update, used-item recording) land together or not at all.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitplan.recommendation.errors import PersistenceFailureError


@contextmanager
def store_errors(operation: str) -> Generator[None, None, None]:
    """Re-raise driver errors from a store call as PersistenceFailureError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Store operation '{operation}' failed: {e}. Error type: {type(e).__name__}")
        raise PersistenceFailureError(f"{operation} failed: {type(e).__name__}") from e


@contextmanager
def unit_of_work(session: Session, operation: str) -> Generator[Session, None, None]:
    """Commit on success, roll back on any error.

    Raises:
        PersistenceFailureError: If the commit (or any wrapped store call) hits a driver error
    """
    try:
        yield session
        with store_errors(operation):
            session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Unit of work '{operation}' failed, rolled back: {e}")
        raise PersistenceFailureError(f"{operation} failed: {type(e).__name__}") from e
    except Exception:
        session.rollback()
        raise
