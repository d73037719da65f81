# dealership/models/vehicle.py
"""
Catalog vehicles table.
Read publicly by the storefront, edited by admins holding vehicles.* permissions.
`category` and `particularity` hold names (not foreign keys); renames cascade in the services.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from dealership.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=False, index=True)
    price = Column(Integer, nullable=False)
    trunk_weight = Column(Integer, nullable=False)
    image_url = Column(Text, nullable=False)
    seats = Column(Integer, nullable=False)
    particularity = Column(String(255))
    page_catalog = Column(Integer)
    manufacturer = Column(String(255))
    realname = Column(String(255))
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Vehicle {self.id} {self.name} category={self.category} price={self.price}>"
