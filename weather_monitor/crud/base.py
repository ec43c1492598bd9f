"""
Generic async CRUD helpers shared by the model-specific CRUD classes.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete

from weather_monitor.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Row-level operations for one model.

    Every write commits immediately; the session's own commit at the end of
    the request then has nothing left to flush.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Fetch one row by primary key, or None."""
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalars().first()

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        order_by: Any = None,
    ) -> List[ModelType]:
        """
        Fetch a page of rows.

        Args:
            db: Database session
            skip: Rows to skip
            limit: Page size, None for no limit
            order_by: Optional column expression, e.g. Model.created_at.desc()
        """
        query = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await db.execute(query.offset(skip).limit(limit))
        return result.scalars().all()

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """Insert a row built from a schema or a plain dict and return it refreshed."""
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**values)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        Apply changes to a loaded row.

        Only keys naming a table column are applied; a schema contributes
        just the fields that were explicitly set.
        """
        changes = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        columns = set(self.model.__table__.columns.keys())

        for field, value in changes.items():
            if field in columns:
                setattr(db_obj, field, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: Any) -> bool:
        """
        Delete a row by primary key.

        Returns False when nothing matched, so of two concurrent deletes of
        the same row only one reports success.
        """
        result = await db.execute(delete(self.model).where(self.model.id == id))
        await db.commit()
        return result.rowcount > 0
