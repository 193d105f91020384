from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security.dependencies import get_token_payload

from .service import AuthService, SessionContext


async def get_current_session(
    claims: dict = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db),
) -> SessionContext:
    """Dependency: the caller's active admin session, or 401."""
    return await AuthService.resolve_session(db, claims)
