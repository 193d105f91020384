from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shared.config.database import Base
from shared.persistence import utcnow

ORDER_PLACED = "placed"
ORDER_CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_email = Column(String(255), nullable=False, index=True)
    total_amount = Column(Float, nullable=False) # calculated at creation
    status = Column(String(16), nullable=False, default=ORDER_PLACED) # placed, cancelled
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    version = Column(Integer, nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.id",
    )

    __mapper_args__ = {"version_id_col": version}


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Not a foreign key: products may be deleted while their orders are kept
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False) # unit price when the order was placed

    order = relationship("Order", back_populates="items")
