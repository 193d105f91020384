"""
Demo admin authentication with explicit sessions.

Lifecycle: login -> active session -> logout (or token expiry). The
session is resolved per request by the get_current_session dependency and
handed to route handlers; there is no process-global "current user".
"""
import uuid
from dataclasses import dataclass

import structlog
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES, ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD
from shared.errors import AuthenticationError
from shared.persistence import utcnow
from shared.security.jwt_handler import create_access_token

from .models import AdminSession, User
from .repository import SessionRepository, UserRepository
from .schemas import TokenResponse, UserLogin

logger = structlog.get_logger(__name__)

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class SessionContext:
    session_id: str
    user_id: int
    email: str
    name: str


class AuthService:

    @staticmethod
    def _hash_password(password: str) -> str:
        return _pwd_context.hash(password)

    @staticmethod
    def _verify_password(plain: str, hashed: str) -> bool:
        return _pwd_context.verify(plain, hashed)

    @staticmethod
    async def seed_admin(
        db: AsyncSession,
        email: str = ADMIN_EMAIL,
        password: str = ADMIN_PASSWORD,
        name: str = ADMIN_NAME,
    ) -> User:
        """Creates the configured admin account unless it already exists."""
        async with unit_of_work(db):
            user = await UserRepository.get_by_email(db, email)
            if user is None:
                user = await UserRepository.create(
                    db,
                    User(
                        email=email.lower(),
                        name=name,
                        hashed_password=AuthService._hash_password(password),
                    ),
                )
                logger.info("admin_seeded", email=user.email)
        return user

    @staticmethod
    async def login(db: AsyncSession, data: UserLogin) -> TokenResponse:
        user = await UserRepository.get_by_email(db, data.email)
        if not user or not AuthService._verify_password(data.password, user.hashed_password):
            logger.info("admin_login_failed", email=data.email)
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is disabled")

        async with unit_of_work(db):
            session = await SessionRepository.create(
                db,
                AdminSession(session_id=str(uuid.uuid4()), user_id=user.id, email=user.email),
            )

        token = create_access_token(data={"sub": user.email, "sid": session.session_id})
        logger.info("admin_login", email=user.email, session_id=session.session_id)
        return TokenResponse(access_token=token, expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60)

    @staticmethod
    async def resolve_session(db: AsyncSession, claims: dict) -> SessionContext:
        session = await SessionRepository.get(db, claims["sid"])
        if session is None or not session.is_active or session.email != claims["sub"]:
            raise AuthenticationError("Session has ended, please log in again")

        user = await UserRepository.get_by_id(db, session.user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("Account is disabled")
        return SessionContext(
            session_id=session.session_id,
            user_id=user.id,
            email=user.email,
            name=user.name,
        )

    @staticmethod
    async def logout(db: AsyncSession, current: SessionContext) -> None:
        async with unit_of_work(db):
            session = await SessionRepository.get(db, current.session_id)
            if session is not None and session.is_active:
                session.is_active = False
                session.ended_at = utcnow()
        logger.info("admin_logout", email=current.email, session_id=current.session_id)
