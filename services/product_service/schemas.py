from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    price: float = Field(ge=0)
    quantity: int = Field(ge=0)
    category: str = ""


class ProductUpdate(BaseModel):
    """Partial update. `version`, when sent, must match the stored row."""
    sku: Optional[str] = Field(default=None, min_length=1, max_length=64)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    version: Optional[int] = None


class ProductResponse(BaseModel):
    id: int
    sku: str
    name: str
    description: str
    price: float
    quantity: int
    category: str
    created_at: datetime
    version: int

    class Config:
        from_attributes = True


StockFilter = Literal["all", "in-stock", "out-of-stock"]
