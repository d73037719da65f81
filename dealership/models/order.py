# dealership/models/order.py
"""
Orders and their line items.
Line items are a snapshot of the vehicle at checkout time (name, category, price, image),
not a foreign key into vehicles, so later catalog edits never rewrite past orders.
Pending-order uniqueness per unique_id is checked in order_service, not by a constraint.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from dealership.database import Base

ORDER_STATUSES = ("pending", "delivered", "cancelled")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    unique_id = Column(String(36), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    total_price = Column(Integer, nullable=False)
    validated_by = Column(String(100))
    validated_at = Column(DateTime)
    cancellation_reason = Column(Text)
    client_ip = Column(String(45))
    created_at = Column(DateTime, index=True)
    updated_at = Column(DateTime)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order {self.id} unique_id={self.unique_id} status={self.status}>"


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(Integer, nullable=False)
    vehicle_name = Column(String(255), nullable=False)
    vehicle_category = Column(String(100), nullable=False)
    vehicle_price = Column(Integer, nullable=False)
    vehicle_image_url = Column(Text)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime)

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem {self.vehicle_name} x{self.quantity}>"
