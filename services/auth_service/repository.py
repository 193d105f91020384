from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AdminSession, User


class UserRepository:

    @staticmethod
    async def create(db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.flush()
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalars().first()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalars().first()


class SessionRepository:

    @staticmethod
    async def create(db: AsyncSession, session: AdminSession) -> AdminSession:
        db.add(session)
        await db.flush()
        return session

    @staticmethod
    async def get(db: AsyncSession, session_id: str) -> Optional[AdminSession]:
        result = await db.execute(select(AdminSession).where(AdminSession.session_id == session_id))
        return result.scalars().first()
