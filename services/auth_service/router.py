from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db

from .dependencies import get_current_session
from .schemas import SessionResponse, TokenResponse, UserLogin
from .service import AuthService, SessionContext

router = APIRouter(prefix="/auth", tags=["Authentication"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health", include_in_schema=False)
async def health_check():
    return {"service": "eshop-admin", "status": "running"}


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and receive a JWT access token",
)
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)):
    return await AuthService.login(db, payload)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="End the current admin session",
)
async def logout(
    current: SessionContext = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    await AuthService.logout(db, current)


@router.get(
    "/me",
    response_model=SessionResponse,
    summary="Get the current admin session",
)
async def get_me(current: SessionContext = Depends(get_current_session)):
    return current
