from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class WalletCreate(BaseModel):
    owner_email: EmailStr


class WalletResponse(BaseModel):
    id: int
    owner_email: str
    balance: float
    created_at: datetime

    class Config:
        from_attributes = True


class MoneyMovement(BaseModel):
    # amount > 0 is enforced by WalletService as well
    amount: float = Field(gt=0)
    reference: str = ""
    description: Optional[str] = None


class TransactionResponse(BaseModel):
    id: int
    wallet_id: int
    type: str
    amount: float
    reference: str
    description: str
    created_at: datetime

    class Config:
        from_attributes = True


class LedgerEntryResponse(TransactionResponse):
    owner_email: str


class BalanceChangeResponse(BaseModel):
    balance: float
    transaction: TransactionResponse

    class Config:
        from_attributes = True


class TransactionSummary(BaseModel):
    total_deposits: float
    total_withdrawals: float
    count: int


class ReconciliationResponse(BaseModel):
    wallet_id: int
    balance: float
    ledger_balance: float
    difference: float
    balanced: bool

    class Config:
        from_attributes = True


TransactionType = Literal["deposit", "withdraw"]
