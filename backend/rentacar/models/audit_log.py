from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON

from rentacar.database import Base


class AuditLog(Base):
    """Append-only audit trail for every state-changing action"""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Who and from where
    actor = Column(String(255), nullable=False)                 # username or "system"
    origin = Column(String(255), nullable=True)                 # client address

    # What happened
    action = Column(String(50), nullable=False, index=True)    # "BOOKING_CREATED", "VEHICLE_ADDED", ...
    entity_type = Column(String(50), nullable=False, index=True)  # "Booking", "Vehicle"
    entity_id = Column(String(50), nullable=False, index=True)
    detail = Column(Text, nullable=True)                        # Human-readable description

    audit_metadata = Column(JSON, nullable=True, name="metadata")  # Additional context

    timestamp = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
