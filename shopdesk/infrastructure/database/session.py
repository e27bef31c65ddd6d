"""Database session management with connection pooling"""

from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError
from shopdesk.config import settings
from shopdesk.domain.exceptions import ConflictError, PersistenceError
from shopdesk.infrastructure.observability.metrics import ledger_conflicts_counter

if settings.database_url.startswith("sqlite"):
    engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})
else:
    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    engine = create_engine(
        settings.database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session, entity: str = "record") -> Iterator[Session]:
    """
    Commit everything staged in the block as one unit, or nothing at all.

    - StaleDataError (version check failed) -> ConflictError
    - Any other SQLAlchemyError -> PersistenceError
    - Domain errors raised in the block roll back and propagate unchanged
    """
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        ledger_conflicts_counter.labels(entity=entity).inc()
        raise ConflictError(f"The {entity} was changed by someone else; refresh and try again") from e
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Failed to save {entity}: {e.__class__.__name__}") from e
    except ConflictError:
        db.rollback()
        ledger_conflicts_counter.labels(entity=entity).inc()
        raise
    except Exception:
        db.rollback()
        raise
