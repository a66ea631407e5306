import logging
from datetime import datetime
from typing import Dict, Any, List, Optional
from sqlalchemy.orm import Session

from rentacar.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class AuditService:
    """Service for audit logging of booking and fleet operations"""

    def __init__(self, db: Session):
        self.db = db

    def record(self,
               actor: Optional[str],
               action: str,
               entity_type: str,
               entity_id,
               detail: Optional[str] = None,
               origin: Optional[str] = None,
               audit_metadata: Optional[Dict[str, Any]] = None) -> AuditLog:
        """
        Append an audit line to the caller's session.

        The row is only added, never committed here: it commits or rolls back
        together with the change it describes.

        Args:
            actor: Username of whoever performed the action ("system" if unknown)
            action: Action code ("BOOKING_CREATED", "VEHICLE_ADDED", etc.)
            entity_type: Type of entity ("Booking", "Vehicle")
            entity_id: ID of the entity
            detail: Human-readable description
            origin: Client address the request came from
            audit_metadata: Additional context data

        Returns:
            The pending audit log entry
        """
        actor_norm = (actor or "").strip() or SYSTEM_ACTOR
        audit_log = AuditLog(
            actor=actor_norm,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else "NEW",
            detail=detail,
            origin=origin,
            audit_metadata=audit_metadata,
            timestamp=datetime.utcnow()
        )

        self.db.add(audit_log)
        logger.info(f"[audit] {actor_norm} {action} {entity_type}#{audit_log.entity_id}: {detail or ''}")
        return audit_log

    def log_booking_action(self, booking_id, action: str, actor: Optional[str] = None, **kwargs) -> AuditLog:
        """Log a booking-related action"""
        return self.record(actor, action, "Booking", booking_id, **kwargs)

    def log_vehicle_action(self, vehicle_id, action: str, actor: Optional[str] = None, **kwargs) -> AuditLog:
        """Log a vehicle-related action"""
        return self.record(actor, action, "Vehicle", vehicle_id, **kwargs)

    def list_for_entity(self, entity_type: str, entity_id) -> List[AuditLog]:
        """Audit trail of one entity, newest first"""
        return self.db.query(AuditLog).filter(
            AuditLog.entity_type == entity_type,
            AuditLog.entity_id == str(entity_id)
        ).order_by(AuditLog.timestamp.desc(), AuditLog.id.desc()).all()
