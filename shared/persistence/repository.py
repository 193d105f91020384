"""
Generic record store over an AsyncSession.

Each collection (products, orders, wallets, wallet transactions) gets a
subclass that only names its model. The five operations mirror a plain
REST resource: list / get / create / patch / delete.

Repositories flush but never commit; the calling service owns the
transaction (see shared.config.database.unit_of_work).
"""
from typing import Any, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from shared.errors import ConflictError, NotFoundError
from shared.observability.metrics import eshop_version_conflicts_total

logger = structlog.get_logger(__name__)


class RecordRepository:
    model: Any = None
    entity: str = "Record"

    @classmethod
    async def list(cls, db: AsyncSession, order_by=None, **filters) -> list:
        """Equality filters on columns; None values are ignored."""
        stmt = select(cls.model)
        for field, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(cls.model, field) == value)
        if order_by is None:
            order_by = [cls.model.id]
        stmt = stmt.order_by(*order_by)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def get(cls, db: AsyncSession, record_id: int):
        result = await db.execute(select(cls.model).where(cls.model.id == record_id))
        record = result.scalars().first()
        if record is None:
            raise NotFoundError(cls.entity, record_id)
        return record

    @classmethod
    async def get_for_update(cls, db: AsyncSession, record_id: int):
        """Fresh read that row-locks where the backend supports it."""
        result = await db.execute(
            select(cls.model)
            .where(cls.model.id == record_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        record = result.scalars().first()
        if record is None:
            raise NotFoundError(cls.entity, record_id)
        return record

    @classmethod
    async def create(cls, db: AsyncSession, **fields):
        record = cls.model(**fields)
        db.add(record)
        await cls.flush(db)
        return record

    @classmethod
    async def patch(
        cls,
        db: AsyncSession,
        record_id: int,
        fields: dict,
        expected_version: Optional[int] = None,
    ):
        record = await cls.get_for_update(db, record_id)
        if expected_version is not None and record.version != expected_version:
            cls._conflict(record_id, expected_version, record.version)
        for name, value in fields.items():
            setattr(record, name, value)
        await cls.flush(db)
        return record

    @classmethod
    async def delete(cls, db: AsyncSession, record_id: int) -> None:
        record = await cls.get(db, record_id)
        await db.delete(record)
        await cls.flush(db)

    @classmethod
    async def flush(cls, db: AsyncSession) -> None:
        try:
            await db.flush()
        except StaleDataError:
            cls._conflict(None, None, None)
        except IntegrityError as e:
            logger.warning("integrity_violation", entity=cls.entity, error=str(e.orig))
            raise ConflictError(f"{cls.entity} violates a uniqueness or integrity constraint") from e

    @classmethod
    def _conflict(cls, record_id, expected, actual):
        eshop_version_conflicts_total.labels(entity=cls.entity).inc()
        logger.warning(
            "version_conflict",
            entity=cls.entity,
            record_id=record_id,
            expected_version=expected,
            actual_version=actual,
        )
        raise ConflictError(f"{cls.entity} was modified concurrently; reload and retry")
