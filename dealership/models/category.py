# dealership/models/category.py
"""Vehicle categories. Inactive categories hide their vehicles from the public catalog."""

from sqlalchemy import Column, Integer, String, DateTime, Boolean
from dealership.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime)
    updated_at = Column(DateTime)

    def __repr__(self):
        return f"<Category {self.name} active={self.is_active}>"
