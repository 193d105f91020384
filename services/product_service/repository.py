from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.persistence import RecordRepository
from .models import Product


class ProductRepository(RecordRepository):
    model = Product
    entity = "Product"

    @staticmethod
    async def search(
        db: AsyncSession,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        stock: str = "all",
    ):
        stmt = select(Product)
        if search:
            term = search.strip()
            stmt = stmt.where(
                or_(
                    Product.sku.icontains(term, autoescape=True),
                    Product.name.icontains(term, autoescape=True),
                )
            )
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        if stock == "in-stock":
            stmt = stmt.where(Product.quantity > 0)
        elif stock == "out-of-stock":
            stmt = stmt.where(Product.quantity == 0)
        result = await db.execute(stmt.order_by(Product.id))
        return result.scalars().all()
