# dealership/schemas/order.py
"""
Checkout payloads arrive in camelCase (storefront cart), responses are the
snake_case order rows with their snapshot items.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class OrderItemIn(BaseModel):
    vehicle_id: Optional[int] = Field(None, alias="vehicleId")
    vehicle_name: Optional[str] = Field(None, alias="vehicleName")
    vehicle_category: Optional[str] = Field(None, alias="vehicleCategory")
    vehicle_price: Optional[int] = Field(None, alias="vehiclePrice")
    vehicle_image_url: Optional[str] = Field(None, alias="vehicleImageUrl")
    quantity: int = 1

    class Config:
        populate_by_name = True


class OrderCreate(BaseModel):
    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    phone: Optional[str] = None
    unique_id: Optional[str] = Field(None, alias="uniqueId")
    items: list[OrderItemIn] = []
    total_price: Optional[int] = Field(None, alias="totalPrice")

    class Config:
        populate_by_name = True


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None
    cancellation_reason: Optional[str] = Field(None, alias="cancellationReason")

    class Config:
        populate_by_name = True


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    vehicle_id: int
    vehicle_name: str
    vehicle_category: str
    vehicle_price: int
    vehicle_image_url: Optional[str]
    quantity: int
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    unique_id: str
    first_name: str
    last_name: str
    phone: str
    status: str
    total_price: int
    validated_by: Optional[str]
    validated_at: Optional[datetime]
    cancellation_reason: Optional[str]
    client_ip: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    items: list[OrderItemOut] = []

    class Config:
        from_attributes = True
