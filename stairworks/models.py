from sqlalchemy import Column, Integer, String, Float, DateTime
from datetime import datetime
from .database import Base


class MaterialPrice(Base):
    __tablename__ = "material_prices"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    unit = Column(String, default="pieces")
    price_per_unit = Column(Float)  # None = not priced, estimate shows quantity only
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    notes = Column(String)
