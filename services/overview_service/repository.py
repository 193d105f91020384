from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.order_service.models import ORDER_CANCELLED, Order
from services.product_service.models import Product
from services.wallet_service.models import Wallet, WalletTransaction


class OverviewRepository:

    @staticmethod
    async def scalar(db: AsyncSession, stmt):
        result = await db.execute(stmt)
        return result.scalar_one()

    @staticmethod
    async def counts(db: AsyncSession) -> dict:
        scalar = OverviewRepository.scalar
        return {
            "total_products": await scalar(db, select(func.count(Product.id))),
            "in_stock_products": await scalar(
                db, select(func.count(Product.id)).where(Product.quantity > 0)
            ),
            "total_orders": await scalar(db, select(func.count(Order.id))),
            "total_revenue": await scalar(
                db,
                select(func.coalesce(func.sum(Order.total_amount), 0.0)).where(
                    Order.status != ORDER_CANCELLED
                ),
            ),
            "total_wallets": await scalar(db, select(func.count(Wallet.id))),
            "total_balance": await scalar(db, select(func.coalesce(func.sum(Wallet.balance), 0.0))),
            "total_transactions": await scalar(db, select(func.count(WalletTransaction.id))),
        }

    @staticmethod
    async def top_products(db: AsyncSession, limit: int = 5):
        result = await db.execute(
            select(Product).order_by(Product.quantity.desc(), Product.id).limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def top_wallets(db: AsyncSession, limit: int = 5):
        result = await db.execute(
            select(Wallet).order_by(Wallet.balance.desc(), Wallet.id).limit(limit)
        )
        return result.scalars().all()
