"""SQLAlchemy declarative base for all models."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def import_models() -> None:
    """Import all models so they are registered on Base.metadata."""
    import frontdesk.models  # noqa: F401
