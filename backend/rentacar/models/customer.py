from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from rentacar.database import Base


class Customer(Base):
    """Booking-side view of a customer; profile data lives with the account service."""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True, unique=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
