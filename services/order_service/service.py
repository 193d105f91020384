"""
Order placement with stock reservation.

place_order runs three passes inside one unit of work while holding the
product locks of every product in the order:

  1. validation  - every line is checked against current stock; one short
                   line rejects the whole order before anything is written
  2. reservation - each product is re-read and decremented
  3. commit      - the order row is inserted and everything is committed

Any failure rolls back all three passes.

delete_order only removes the record and never gives stock back;
cancel_order is the operation that restores it.
"""
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import ConflictError, InsufficientStockError, NotFoundError, ValidationError
from shared.observability.metrics import (
    eshop_order_rejections_total,
    eshop_orders_placed_total,
    eshop_stock_restorations_total,
)
from services.product_service.repository import ProductRepository
from services.product_service.service import ProductService, product_locks
from .models import ORDER_CANCELLED, ORDER_PLACED, Order, OrderItem
from .repository import OrderRepository
from .schemas import OrderCreate

logger = structlog.get_logger(__name__)


def _requested_quantities(data: OrderCreate) -> dict:
    """Total quantity per product; repeated lines for one product are summed."""
    if not data.customer_email or not data.customer_email.strip():
        raise ValidationError("customer_email", "customer email is required")
    if not data.items:
        raise ValidationError("items", "at least one item is required")

    requested = {}
    for item in data.items:
        if item.quantity <= 0:
            raise ValidationError("items", "all quantities must be greater than 0")
        requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity
    return requested


class OrderService:

    @staticmethod
    async def place_order(db: AsyncSession, data: OrderCreate) -> Order:
        try:
            requested = _requested_quantities(data)
        except ValidationError:
            eshop_order_rejections_total.labels(reason="invalid").inc()
            raise

        try:
            async with product_locks.hold(*requested), unit_of_work(db):
                # 1. Validation pass
                catalogue = {}
                for product_id, quantity in requested.items():
                    product = await ProductRepository.get_for_update(db, product_id)
                    if product.quantity < quantity:
                        raise InsufficientStockError(product.name, product.quantity)
                    catalogue[product_id] = product

                # 2. Reservation pass
                for product_id, quantity in requested.items():
                    await ProductService.reserve_stock(db, product_id, quantity)

                # 3. Commit pass
                lines = [
                    OrderItem(
                        product_id=item.product_id,
                        product_name=catalogue[item.product_id].name,
                        quantity=item.quantity,
                        price=catalogue[item.product_id].price,
                    )
                    for item in data.items
                ]
                order = await OrderRepository.create(
                    db,
                    customer_email=data.customer_email.strip(),
                    items=lines,
                    total_amount=round(sum(line.price * line.quantity for line in lines), 2),
                    status=ORDER_PLACED,
                )
        except InsufficientStockError as e:
            eshop_order_rejections_total.labels(reason="insufficient_stock").inc()
            logger.info("order_rejected", reason="insufficient_stock", product=e.product_name, available=e.available)
            raise
        except NotFoundError as e:
            eshop_order_rejections_total.labels(reason="not_found").inc()
            logger.info("order_rejected", reason="not_found", product_id=e.entity_id)
            raise

        eshop_orders_placed_total.inc()
        logger.info(
            "order_placed",
            order_id=order.id,
            customer_email=order.customer_email,
            lines=len(order.items),
            total_amount=order.total_amount,
        )
        return order

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Order:
        return await OrderRepository.get(db, order_id)

    @staticmethod
    async def list_orders(db: AsyncSession, **filters):
        return await OrderRepository.search(db, **filters)

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int) -> None:
        # Record removal only: reserved stock stays consumed
        async with unit_of_work(db):
            await OrderRepository.delete(db, order_id)
        logger.info("order_deleted", order_id=order_id, stock_restored=False)

    @staticmethod
    async def cancel_order(db: AsyncSession, order_id: int) -> Order:
        order = await OrderRepository.get(db, order_id)
        product_ids = [item.product_id for item in order.items]

        restored = 0
        async with product_locks.hold(*product_ids), unit_of_work(db):
            order = await OrderRepository.get_for_update(db, order_id)
            if order.status == ORDER_CANCELLED:
                raise ConflictError(f"Order {order_id} is already cancelled")

            for item in order.items:
                try:
                    await ProductService.restore_stock(db, item.product_id, item.quantity)
                except NotFoundError:
                    logger.warning(
                        "stock_restore_skipped",
                        order_id=order_id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                    )
                    continue
                restored += 1

            order.status = ORDER_CANCELLED
            await OrderRepository.flush(db)

        eshop_stock_restorations_total.inc(restored)
        logger.info("order_cancelled", order_id=order_id, lines_restored=restored)
        return order
