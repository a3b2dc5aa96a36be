from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from fitplan.config.settings import settings


def _is_postgresql(url: str) -> bool:
    return "postgresql" in url.lower() or "postgres" in url.lower()


def _validate_postgresql_driver() -> None:
    """Validate PostgreSQL driver is installed when using PostgreSQL.

    Must actually import psycopg2 (not just find_spec) because SQLAlchemy
    will try to import it when creating the engine.
    """
    try:
        import psycopg2  # noqa: F401

        logger.info("PostgreSQL driver (psycopg2) is available")
    except ImportError as e:
        logger.error(
            "⚠️ CRITICAL: PostgreSQL driver (psycopg2) is not installed!\n"
            "Install it with: pip install 'fitplan[postgres]'"
        )
        raise ImportError("PostgreSQL driver required. Install with: pip install psycopg2-binary") from e


# Lazy initialization to avoid import-time database connections
_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine (lazy initialization)."""
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        connect_args = {}
        if _is_postgresql(settings.database_url):
            _validate_postgresql_driver()
            connect_args = {
                "connect_timeout": 10,
                "application_name": "fitplan",
            }
        elif "sqlite" in settings.database_url.lower():
            logger.warning("Using SQLite database (local development only)")
            connect_args = {"check_same_thread": False}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine():
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Get database session for FastAPI dependencies.

    Plain generator (not a context manager) so FastAPI can use it with
    Depends(). Units of work inside the request commit explicitly.

    Yields:
        Session: SQLAlchemy database session
    """
    logger.debug("Creating new database session (FastAPI dependency)")
    session = _get_session_local()()
    try:
        yield session
    finally:
        session.close()
        logger.debug("Database session closed")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager that commits on success.

    - HTTPException and domain errors: rolled back and re-raised without
      database-error logging (expected outcomes, not DB failures)
    - Other exceptions: logged as database errors and rolled back
    """
    session = _get_session_local()()
    try:
        yield session
        session.commit()
        logger.debug("Database session committed successfully")
    except HTTPException:
        session.rollback()
        raise
    except Exception as e:
        from fitplan.recommendation.errors import FitPlanError

        session.rollback()
        if isinstance(e, FitPlanError):
            logger.debug(f"{type(e).__name__} in session, rolled back")
            raise
        logger.error(f"Database session error, rolling back: {e}. Error type: {type(e).__name__}")
        raise
    finally:
        session.close()
