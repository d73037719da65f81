# dealership/schemas/vehicle.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class VehicleIn(BaseModel):
    # Everything optional here: missing fields get a French 400 from vehicle_service
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[int] = None
    trunk_weight: Optional[int] = None
    image_url: Optional[str] = None
    seats: Optional[int] = None
    particularity: Optional[str] = None
    page_catalog: Optional[int] = None
    manufacturer: Optional[str] = None
    realname: Optional[str] = None


class VehicleOut(BaseModel):
    id: int
    name: str
    category: str
    price: int
    trunk_weight: int
    image_url: str
    seats: int
    particularity: Optional[str]
    page_catalog: Optional[int]
    manufacturer: Optional[str]
    realname: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class VehiclePage(BaseModel):
    vehicles: list[VehicleOut]
    total: int


class VehicleDeleted(BaseModel):
    message: str
    vehicle: VehicleOut
