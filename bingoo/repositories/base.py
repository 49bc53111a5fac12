from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[T, SchemaType], ABC):
    """Base class for all repositories; reads come back as pydantic schemas.

    Repositories only flush. Commit and rollback belong to the service that
    owns the unit of work (see ``bingoo.database.session.atomic``).
    """

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        if model_instance is None:
            return None
        return self.schema_class.model_validate(model_instance)

    def _to_schemas(self, model_instances) -> List[SchemaType]:
        return [self._to_schema(instance) for instance in model_instances]

    def _get_model(self, id: Any, for_update: bool = False) -> Optional[T]:
        stmt = select(self.model_class).where(getattr(self.model_class, "id") == id)
        stmt = stmt.execution_options(populate_existing=True)
        if for_update:
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        return self._to_schema(self._get_model(id))

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        stmt = select(self.model_class).where(
            getattr(self.model_class, field_name) == value
        )
        return self._to_schema(self.db.execute(stmt).scalars().first())

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count()).select_from(self.model_class)
        if filters:
            for key, value in filters.items():
                if hasattr(self.model_class, key):
                    stmt = stmt.where(getattr(self.model_class, key) == value)
        return self.db.execute(stmt).scalar_one()

    def create(self, **kwargs) -> SchemaType:
        """Insert a row and flush so generated columns are populated."""
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self.db.flush()
        self.db.refresh(instance)
        return self._to_schema(instance)

    def update(self, instance_id: Any, **kwargs) -> Optional[SchemaType]:
        instance = self._get_model(instance_id)
        if not instance:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self.db.flush()
        self.db.refresh(instance)
        return self._to_schema(instance)

    def delete(self, instance_id: Any) -> bool:
        instance = self._get_model(instance_id)
        if not instance:
            return False
        self.db.delete(instance)
        self.db.flush()
        return True
