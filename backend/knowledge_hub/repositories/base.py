from typing import Generic, TypeVar, Type
from sqlalchemy.orm import Session
from ..core.database import Base
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Shared CRUD helpers; callers own commit/rollback"""

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def create(self, **kwargs) -> ModelType:
        """Add a record and flush so its id is assigned"""
        instance = self.model(**kwargs)
        self.db.add(instance)
        self.db.flush()
        logger.debug(f"Created {self.model.__name__} with id: {instance.id}")
        return instance

    def update_instance(self, instance: ModelType, **kwargs) -> ModelType:
        """Set every non-None field on an already loaded record"""
        for key, value in kwargs.items():
            if value is not None:
                setattr(instance, key, value)
        self.db.flush()
        logger.debug(f"Updated {self.model.__name__} with id: {instance.id}")
        return instance

    def delete_instance(self, instance: ModelType) -> None:
        """Delete an already loaded record (ORM cascades apply)"""
        self.db.delete(instance)
        self.db.flush()
        logger.debug(f"Deleted {self.model.__name__} with id: {instance.id}")

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
