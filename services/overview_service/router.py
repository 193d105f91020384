from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from services.auth_service.dependencies import get_current_session
from .schemas import OverviewResponse
from .service import OverviewService

router = APIRouter(
    prefix="/overview",
    tags=["Overview"],
    dependencies=[Depends(get_current_session)],
)

@router.get("/", response_model=OverviewResponse)
async def get_overview(db: AsyncSession = Depends(get_db)):
    return await OverviewService.get_overview(db)
