# dealership/models/particularity.py
from sqlalchemy import Column, Integer, String, DateTime
from dealership.database import Base


class Particularity(Base):
    __tablename__ = "particularities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<Particularity {self.name}>"
