from datetime import timedelta
from typing import Optional

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.persistence import RecordRepository, utcnow
from .models import Order, OrderItem


def _item_count():
    return (
        select(func.count(OrderItem.id))
        .where(OrderItem.order_id == Order.id)
        .correlate(Order)
        .scalar_subquery()
    )


class OrderRepository(RecordRepository):
    model = Order
    entity = "Order"

    @staticmethod
    async def search(
        db: AsyncSession,
        search: Optional[str] = None,
        days: Optional[int] = None,
        min_total: Optional[float] = None,
        max_total: Optional[float] = None,
        min_items: Optional[int] = None,
        max_items: Optional[int] = None,
        sort: str = "date-desc",
    ):
        item_count = _item_count()
        stmt = select(Order)

        if search:
            term = search.strip()
            stmt = stmt.where(
                or_(
                    Order.customer_email.icontains(term, autoescape=True),
                    cast(Order.id, String).contains(term, autoescape=True),
                )
            )
        if days:
            stmt = stmt.where(Order.created_at >= utcnow() - timedelta(days=days))
        if min_total is not None:
            stmt = stmt.where(Order.total_amount >= min_total)
        if max_total is not None:
            stmt = stmt.where(Order.total_amount <= max_total)
        if min_items is not None:
            stmt = stmt.where(item_count >= min_items)
        if max_items is not None:
            stmt = stmt.where(item_count <= max_items)

        ordering = {
            "date-asc": [Order.created_at.asc(), Order.id.asc()],
            "date-desc": [Order.created_at.desc(), Order.id.desc()],
            "price-asc": [Order.total_amount.asc(), Order.id.asc()],
            "price-desc": [Order.total_amount.desc(), Order.id.desc()],
            "items-asc": [item_count.asc(), Order.id.asc()],
            "items-desc": [item_count.desc(), Order.id.desc()],
        }
        stmt = stmt.order_by(*ordering.get(sort, ordering["date-desc"]))
        result = await db.execute(stmt)
        return result.scalars().all()
