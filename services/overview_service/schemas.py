from datetime import date
from typing import List

from pydantic import BaseModel


class StockLevel(BaseModel):
    id: int
    sku: str
    name: str
    quantity: int

    class Config:
        from_attributes = True


class WalletBalance(BaseModel):
    owner: str
    owner_email: str
    balance: float


class DailyFlow(BaseModel):
    day: date
    deposits: float
    withdrawals: float


class OverviewResponse(BaseModel):
    total_products: int
    in_stock_products: int
    total_orders: int
    total_revenue: float
    total_wallets: int
    total_balance: float
    total_transactions: int
    top_products: List[StockLevel]
    top_wallets: List[WalletBalance]
    daily_flows: List[DailyFlow]
