from collections.abc import Generator, Iterator
from contextlib import contextmanager
import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.errors import StorageError


logger = logging.getLogger(__name__)


def _engine_options() -> dict:
    options: dict = {'pool_pre_ping': True}
    if settings.is_sqlite:
        options['connect_args'] = {'check_same_thread': False}
    return options


engine = create_engine(settings.DATABASE_URL, **_engine_options())
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work atomically: commit on success, roll back on any error.

    Domain errors propagate unchanged; driver/ORM failures surface as StorageError
    carrying the original message.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error('Transaction rolled back: %s', exc)
        raise StorageError(f'Storage transaction failed: {exc}') from exc
    except Exception:
        db.rollback()
        raise
