from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String

from shared.config.database import Base
from shared.persistence import register_immutable, utcnow

DEPOSIT = "deposit"
WITHDRAW = "withdraw"


class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_wallets_balance_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_email = Column(String(255), nullable=False, index=True) # not unique
    balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}


class WalletTransaction(Base):
    """Append-only audit record; one row per deposit or withdrawal."""
    __tablename__ = "wallet_transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_wallet_transactions_amount_positive"),
        CheckConstraint("type IN ('deposit', 'withdraw')", name="ck_wallet_transactions_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    amount = Column(Float, nullable=False)
    reference = Column(String(255), nullable=False, default="")
    description = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)


register_immutable(WalletTransaction)
