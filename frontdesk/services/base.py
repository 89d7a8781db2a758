"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.config.settings import Settings, get_settings
from frontdesk.core.exceptions import BaseAppException, DatabaseError
from frontdesk.core.logging import get_logger


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger, settings and db session
    - Transaction management with rollback on failure
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        """
        Initialize base service.

        Args:
            db: SQLAlchemy database session
            settings: Application settings, defaults to the cached settings
        """
        self.db = db
        self.settings = settings or get_settings()
        self._logger = get_logger(f"frontdesk.services.{self.__class__.__name__}")

    @contextmanager
    def transaction(self, operation: str) -> Iterator[Session]:
        """
        Commit on success, roll back on any error.

        Application exceptions propagate unchanged; database errors are
        wrapped in DatabaseError with the operation name.
        """
        try:
            yield self.db
            self.db.commit()
        except BaseAppException:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"Error during {operation}: {e}", exc_info=True)
            raise DatabaseError(f"Failed to {operation}", details={"reason": str(e)}) from e
