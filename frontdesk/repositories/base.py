"""
Base repository with standardized CRUD operations and error handling.

Repositories flush rather than commit; the calling service owns the
transaction boundary.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.exceptions import DatabaseError, DuplicateEntryError, NotFoundError
from frontdesk.core.logging import get_logger
from frontdesk.models.base import BaseModel

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for a single model.

    Subclasses set ``not_found_error`` to the NotFoundError subclass that
    get_by_id raises.
    """

    not_found_error: Type[NotFoundError] = NotFoundError

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    # ==================== Read Operations ====================

    def find_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """Get entity by ID, None if absent."""
        if entity_id is None:
            return None
        try:
            return self.db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load {self.model.__name__}: {e}") from e

    def get_by_id(self, entity_id: Any) -> ModelType:
        """
        Get entity by ID.

        Raises:
            NotFoundError: If entity does not exist
        """
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def count(self) -> int:
        return self.db.execute(select(func.count()).select_from(self.model)).scalar_one()

    # ==================== Write Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Add entity to the session and flush so defaults and IDs are populated.

        Raises:
            DuplicateEntryError: On unique constraint violations
            DatabaseError: On other database failures
        """
        try:
            self.db.add(entity)
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateEntryError(f"{self.model.__name__} already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseError(f"Create failed: {e}") from e

        logger.debug(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    def update(self, entity: ModelType, **values: Any) -> ModelType:
        """Apply field values and flush."""
        for key, value in values.items():
            if hasattr(entity, key):
                setattr(entity, key, value)
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseError(f"Update failed: {e}") from e
        return entity

    def delete(self, entity: ModelType) -> None:
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseError(f"Delete failed: {e}") from e
        logger.debug(f"Deleted {self.model.__name__} with id: {entity.id}")
