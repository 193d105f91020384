import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import unit_of_work
from shared.errors import InsufficientStockError, ValidationError
from shared.persistence import EntityLocks
from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)

# Serializes stock writers (edits, order placement, cancellation) per product id
product_locks = EntityLocks("product")

_TEXT_FIELDS = ("sku", "name", "description", "category")
_REQUIRED_TEXT = ("sku", "name")


def _clean(fields: dict) -> dict:
    """Strips text; an explicit null clears optional text and is refused elsewhere."""
    cleaned = {}
    for key, value in fields.items():
        if value is None:
            if key in _TEXT_FIELDS and key not in _REQUIRED_TEXT:
                cleaned[key] = ""
                continue
            raise ValidationError(key, "must not be null")
        if key in _TEXT_FIELDS:
            value = value.strip()
            if key in _REQUIRED_TEXT and not value:
                raise ValidationError(key, "must not be blank")
        cleaned[key] = value
    return cleaned


class ProductService:

    @staticmethod
    async def create_product(db: AsyncSession, data: ProductCreate) -> Product:
        async with unit_of_work(db):
            product = await ProductRepository.create(db, **_clean(data.model_dump()))
        logger.info("product_created", product_id=product.id, sku=product.sku, quantity=product.quantity)
        return product

    @staticmethod
    async def list_products(db: AsyncSession, search=None, min_price=None, max_price=None, stock="all"):
        return await ProductRepository.search(db, search, min_price, max_price, stock)

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Product:
        return await ProductRepository.get(db, product_id)

    @staticmethod
    async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> Product:
        fields = _clean(data.model_dump(exclude_unset=True, exclude={"version"}))
        async with product_locks.hold(product_id), unit_of_work(db):
            product = await ProductRepository.patch(
                db, product_id, fields, expected_version=data.version
            )
        logger.info("product_updated", product_id=product_id, fields=sorted(fields), version=product.version)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product_id: int) -> None:
        async with product_locks.hold(product_id), unit_of_work(db):
            await ProductRepository.delete(db, product_id)
        logger.info("product_deleted", product_id=product_id)

    # --- Stock primitives used inside an order's unit of work (no commit here) ---

    @staticmethod
    async def reserve_stock(db: AsyncSession, product_id: int, quantity: int) -> Product:
        # Re-read: the validation pass may have seen an older row
        product = await ProductRepository.get_for_update(db, product_id)
        if product.quantity < quantity:
            raise InsufficientStockError(product.name, product.quantity)
        product.quantity -= quantity
        await ProductRepository.flush(db)
        return product

    @staticmethod
    async def restore_stock(db: AsyncSession, product_id: int, quantity: int) -> Product:
        product = await ProductRepository.get_for_update(db, product_id)
        product.quantity += quantity
        await ProductRepository.flush(db)
        return product
