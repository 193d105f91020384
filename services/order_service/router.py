from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from services.auth_service.dependencies import get_current_session
from .schemas import OrderCreate, OrderResponse, OrderSort
from .service import OrderService

router = APIRouter(
    prefix="/orders",
    tags=["Orders"],
    dependencies=[Depends(get_current_session)],
)

@router.post("/", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(order: OrderCreate, db: AsyncSession = Depends(get_db)):
    return await OrderService.place_order(db, order)

@router.get("/", response_model=list[OrderResponse])
async def list_orders(
    search: Optional[str] = Query(default=None),
    days: Optional[int] = Query(default=None, gt=0),
    min_total: Optional[float] = Query(default=None, ge=0),
    max_total: Optional[float] = Query(default=None, ge=0),
    min_items: Optional[int] = Query(default=None, ge=0),
    max_items: Optional[int] = Query(default=None, ge=0),
    sort: OrderSort = Query(default="date-desc"),
    db: AsyncSession = Depends(get_db),
):
    return await OrderService.list_orders(
        db,
        search=search,
        days=days,
        min_total=min_total,
        max_total=max_total,
        min_items=min_items,
        max_items=max_items,
        sort=sort,
    )

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await OrderService.get_order(db, order_id)

# Gives the stock back; the order stays on record as cancelled
@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await OrderService.cancel_order(db, order_id)

# Removes the record only; stock is NOT restored
@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: int, db: AsyncSession = Depends(get_db)):
    await OrderService.delete_order(db, order_id)
