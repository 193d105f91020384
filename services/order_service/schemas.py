from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, EmailStr


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int # must be > 0; enforced by OrderService


class OrderCreate(BaseModel):
    # Line names and prices are taken from the product records, not the client
    customer_email: EmailStr
    items: List[OrderItemCreate]


class OrderItemResponse(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    customer_email: str
    items: List[OrderItemResponse]
    total_amount: float
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


OrderSort = Literal["date-desc", "date-asc", "price-asc", "price-desc", "items-asc", "items-desc"]
