from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from bilemo.core.database import Base


class Phone(Base):
    __tablename__ = "phones"

    id = Column(Integer, primary_key=True, index=True)
    model = Column(String(255), nullable=False)
    manufacturer = Column(String(255), nullable=False)
    processor = Column(String(255), nullable=False)
    ram = Column(String(255), nullable=False)
    storage_capacity = Column(String(255), nullable=False)
    camera_details = Column(String(255), nullable=False)
    battery_life = Column(String(255), nullable=False)
    screen_size = Column(String(255), nullable=False)
    price = Column(String(255), nullable=False)
    stock_quantity = Column(String(255), nullable=True)
    release_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
