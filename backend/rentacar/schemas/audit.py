from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class AuditLogResponse(BaseModel):
    id: int
    actor: str
    action: str
    entity_type: str
    entity_id: str
    detail: Optional[str] = None
    origin: Optional[str] = None
    timestamp: datetime
    metadata: Optional[Dict[str, Any]] = Field(None, alias="audit_metadata")

    model_config = {"from_attributes": True, "populate_by_name": True}
