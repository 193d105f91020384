from sqlalchemy.ext.asyncio import AsyncSession

from services.wallet_service.repository import TransactionRepository
from .repository import OverviewRepository


class OverviewService:

    @staticmethod
    async def get_overview(db: AsyncSession) -> dict:
        overview = await OverviewRepository.counts(db)
        overview["total_revenue"] = round(float(overview["total_revenue"]), 2)
        overview["total_balance"] = round(float(overview["total_balance"]), 2)
        overview["top_products"] = await OverviewRepository.top_products(db)
        overview["top_wallets"] = [
            {
                "owner": wallet.owner_email.split("@")[0],
                "owner_email": wallet.owner_email,
                "balance": wallet.balance,
            }
            for wallet in await OverviewRepository.top_wallets(db)
        ]
        overview["daily_flows"] = await TransactionRepository.daily_totals(db, days=7)
        return overview
