from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.persistence import RecordRepository
from .models import DEPOSIT, WITHDRAW, Wallet, WalletTransaction


class WalletRepository(RecordRepository):
    model = Wallet
    entity = "Wallet"

    @staticmethod
    async def latest_for_owner(db: AsyncSession, owner_email: str) -> Optional[Wallet]:
        result = await db.execute(
            select(Wallet)
            .where(func.lower(Wallet.owner_email) == owner_email.lower())
            .order_by(Wallet.id.desc())
        )
        return result.scalars().first()


class TransactionRepository(RecordRepository):
    model = WalletTransaction
    entity = "Transaction"

    NEWEST_FIRST = (WalletTransaction.created_at.desc(), WalletTransaction.id.desc())

    @staticmethod
    async def search(
        db: AsyncSession,
        type: Optional[str] = None,
        wallet_id: Optional[int] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ):
        """Newest first, as (transaction, owner_email) rows."""
        stmt = select(WalletTransaction, Wallet.owner_email).join(
            Wallet, Wallet.id == WalletTransaction.wallet_id
        )
        if type:
            stmt = stmt.where(WalletTransaction.type == type)
        if wallet_id is not None:
            stmt = stmt.where(WalletTransaction.wallet_id == wallet_id)
        if search:
            term = search.strip()
            stmt = stmt.where(
                or_(
                    Wallet.owner_email.icontains(term, autoescape=True),
                    WalletTransaction.reference.icontains(term, autoescape=True),
                    WalletTransaction.description.icontains(term, autoescape=True),
                )
            )
        stmt = stmt.order_by(*TransactionRepository.NEWEST_FIRST).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return result.all()

    @staticmethod
    async def totals(db: AsyncSession, wallet_id: Optional[int] = None) -> dict:
        """Sum and count per transaction type."""
        stmt = select(
            WalletTransaction.type,
            func.coalesce(func.sum(WalletTransaction.amount), 0.0),
            func.count(WalletTransaction.id),
        ).group_by(WalletTransaction.type)
        if wallet_id is not None:
            stmt = stmt.where(WalletTransaction.wallet_id == wallet_id)
        result = await db.execute(stmt)

        totals = {DEPOSIT: (0.0, 0), WITHDRAW: (0.0, 0)}
        for kind, amount, count in result.all():
            totals[kind] = (float(amount), count)
        return totals

    @staticmethod
    async def daily_totals(db: AsyncSession, days: int = 7):
        """Deposit/withdrawal sums for the most recent `days` dates with activity, oldest first."""
        day = func.date(WalletTransaction.created_at).label("day")
        stmt = (
            select(day, WalletTransaction.type, func.sum(WalletTransaction.amount))
            .group_by(day, WalletTransaction.type)
            .order_by(day.desc())
        )
        result = await db.execute(stmt)

        grouped = {}
        for row_day, kind, amount in result.all():
            flows = grouped.setdefault(row_day, {"day": row_day, "deposits": 0.0, "withdrawals": 0.0})
            flows["deposits" if kind == DEPOSIT else "withdrawals"] += float(amount)
        return list(reversed(list(grouped.values())[:days]))
