"""Database initialization utilities."""
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from frontdesk.db.base import Base, import_models

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """
    Create any missing tables.

    Suitable for development and tests; production schemas are managed
    by migrations.
    """
    import_models()
    existing_tables = set(inspect(engine).get_table_names())
    Base.metadata.create_all(bind=engine)
    created = set(Base.metadata.tables) - existing_tables
    if created:
        logger.info(f"Created {len(created)} tables: {', '.join(sorted(created))}")
    else:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")


def drop_db(engine: Engine) -> None:
    """Drop all tables. Development and test use only."""
    import_models()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
