from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .settings import DATABASE_URL, SQL_ECHO

engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession):
    """Commits everything flushed inside the block, or rolls all of it back."""
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
