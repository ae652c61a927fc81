import contextlib
import logging

from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import PersistenceError
from database.database import SessionLocal
from database.repository import MarketplaceRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def marketplace_uow():
    """Per-unit-of-work transaction scope.

    Yields a MarketplaceRepository bound to a fresh Session. Commits on
    success, rolls back on exception, always closes. Database errors are
    re-raised as PersistenceError with the original as __cause__.

    Usage:
        with marketplace_uow() as repo:
            job = repo.jobs.get_by_id(job_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = SessionLocal()
    try:
        repo = MarketplaceRepository(session)
        yield repo
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Unit of work rolled back: {e}")
        raise PersistenceError(str(e)) from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
