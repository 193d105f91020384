"""
Wallet ledger.

The wallet row holds the authoritative balance; wallet_transactions is the
append-only log of every balance change. A deposit or withdrawal writes
both in one unit of work under the wallet's lock, so the log always
reconciles with the balance:

    balance == sum(deposits) - sum(withdrawals)
"""
import math
from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import InsufficientBalanceError, NotFoundError, ValidationError
from shared.observability.metrics import eshop_wallet_operations_total
from shared.persistence import EntityLocks
from .models import DEPOSIT, WITHDRAW, Wallet, WalletTransaction
from .repository import TransactionRepository, WalletRepository

logger = structlog.get_logger(__name__)

wallet_locks = EntityLocks("wallet")

DEFAULT_DESCRIPTIONS = {DEPOSIT: "Deposit", WITHDRAW: "Withdrawal"}


@dataclass
class BalanceChange:
    balance: float
    transaction: WalletTransaction


@dataclass
class Reconciliation:
    wallet_id: int
    balance: float
    ledger_balance: float
    difference: float
    balanced: bool


def _validated_amount(amount) -> float:
    if amount is None or not math.isfinite(amount) or not amount > 0:
        raise ValidationError("amount", "must be a number greater than 0")
    # Whole cents only; the recorded amount is exactly the requested one
    if round(amount, 2) != amount:
        raise ValidationError("amount", "must not have more than 2 decimal places")
    return float(amount)


class WalletService:

    @staticmethod
    async def create_wallet(db: AsyncSession, owner_email: str) -> Wallet:
        owner_email = (owner_email or "").strip()
        if not owner_email:
            raise ValidationError("owner_email", "owner email is required")
        async with unit_of_work(db):
            wallet = await WalletRepository.create(db, owner_email=owner_email, balance=0.0)
        logger.info("wallet_created", wallet_id=wallet.id, owner_email=owner_email)
        return wallet

    @staticmethod
    async def list_wallets(db: AsyncSession):
        return await WalletRepository.list(db)

    @staticmethod
    async def get_wallet(db: AsyncSession, wallet_id: int) -> Wallet:
        return await WalletRepository.get(db, wallet_id)

    @staticmethod
    async def get_wallet_for_owner(db: AsyncSession, owner_email: str) -> Wallet:
        wallet = await WalletRepository.latest_for_owner(db, owner_email)
        if wallet is None:
            raise NotFoundError("Wallet for", owner_email)
        return wallet

    @staticmethod
    async def deposit(
        db: AsyncSession,
        wallet_id: int,
        amount: float,
        reference: str = "",
        description: Optional[str] = None,
    ) -> BalanceChange:
        return await WalletService._apply(db, wallet_id, DEPOSIT, amount, reference, description)

    @staticmethod
    async def withdraw(
        db: AsyncSession,
        wallet_id: int,
        amount: float,
        reference: str = "",
        description: Optional[str] = None,
    ) -> BalanceChange:
        return await WalletService._apply(db, wallet_id, WITHDRAW, amount, reference, description)

    @staticmethod
    async def _apply(db, wallet_id, kind, amount, reference, description) -> BalanceChange:
        try:
            amount = _validated_amount(amount)
        except ValidationError:
            eshop_wallet_operations_total.labels(type=kind, outcome="rejected").inc()
            raise

        async with wallet_locks.hold(wallet_id), unit_of_work(db):
            wallet = await WalletRepository.get_for_update(db, wallet_id)

            if kind == WITHDRAW and amount > wallet.balance:
                eshop_wallet_operations_total.labels(type=kind, outcome="rejected").inc()
                logger.info(
                    "withdraw_rejected",
                    wallet_id=wallet_id,
                    balance=wallet.balance,
                    requested=amount,
                )
                raise InsufficientBalanceError(wallet.balance, amount)

            delta = amount if kind == DEPOSIT else -amount
            wallet.balance = round(wallet.balance + delta, 2)
            await WalletRepository.flush(db)

            transaction = await TransactionRepository.create(
                db,
                wallet_id=wallet_id,
                type=kind,
                amount=amount,
                reference=(reference or "").strip(),
                description=(description or "").strip() or DEFAULT_DESCRIPTIONS[kind],
            )

        eshop_wallet_operations_total.labels(type=kind, outcome="success").inc()
        logger.info(
            f"wallet_{kind}",
            wallet_id=wallet_id,
            amount=amount,
            balance=wallet.balance,
            transaction_id=transaction.id,
        )
        return BalanceChange(balance=wallet.balance, transaction=transaction)

    @staticmethod
    async def get_transactions(db: AsyncSession, wallet_id: int):
        await WalletRepository.get(db, wallet_id)
        return await TransactionRepository.list(
            db, order_by=TransactionRepository.NEWEST_FIRST, wallet_id=wallet_id
        )

    @staticmethod
    async def get_all_transactions(db: AsyncSession, **filters) -> list[dict]:
        rows = await TransactionRepository.search(db, **filters)
        return [
            {
                "id": txn.id,
                "wallet_id": txn.wallet_id,
                "type": txn.type,
                "amount": txn.amount,
                "reference": txn.reference,
                "description": txn.description,
                "created_at": txn.created_at,
                "owner_email": owner_email,
            }
            for txn, owner_email in rows
        ]

    @staticmethod
    async def transaction_summary(db: AsyncSession, wallet_id: Optional[int] = None) -> dict:
        if wallet_id is not None:
            await WalletRepository.get(db, wallet_id)
        totals = await TransactionRepository.totals(db, wallet_id)
        deposits, deposit_count = totals[DEPOSIT]
        withdrawals, withdraw_count = totals[WITHDRAW]
        return {
            "total_deposits": round(deposits, 2),
            "total_withdrawals": round(withdrawals, 2),
            "count": deposit_count + withdraw_count,
        }

    @staticmethod
    async def reconcile(db: AsyncSession, wallet_id: int) -> Reconciliation:
        wallet = await WalletRepository.get(db, wallet_id)
        totals = await TransactionRepository.totals(db, wallet_id)
        ledger_balance = round(totals[DEPOSIT][0] - totals[WITHDRAW][0], 2)
        difference = round(wallet.balance - ledger_balance, 2)
        if difference:
            logger.warning(
                "ledger_mismatch",
                wallet_id=wallet_id,
                balance=wallet.balance,
                ledger_balance=ledger_balance,
            )
        return Reconciliation(
            wallet_id=wallet_id,
            balance=wallet.balance,
            ledger_balance=ledger_balance,
            difference=difference,
            balanced=difference == 0,
        )
