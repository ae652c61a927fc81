import logging

from sqlalchemy import text

from database.database import engine
from database.models import Base

logger = logging.getLogger(__name__)


def init_db(bind=None) -> None:
    """Create the pgvector extension and all marketplace tables."""
    bind = bind or engine
    with bind.connect() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        conn.commit()
    Base.metadata.create_all(bind)
    logger.info("Database schema initialized")
