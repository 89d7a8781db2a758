"""Database engine and session management."""
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from frontdesk.config.settings import Settings


def create_db_engine(settings: Settings, url: Optional[str] = None) -> Engine:
    """
    Create the engine for the configured database.

    SQLite engines skip the pool sizing options and allow use across
    the threads FastAPI runs sync endpoints on.
    """
    database_url = url or settings.get_database_url()
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_OVERFLOW,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    The session factory is built by the application factory and kept on
    ``app.state`` so each app instance owns its own database client.

    Usage in FastAPI endpoints:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
