import uuid
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class ErrorDetail(BaseModel):
    code: str                                   # VALIDATION_ERROR, NOT_FOUND, CONFLICT, ILLEGAL_STATE, ...
    message: str
    field: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def build(cls, code: str, message: str, field: Optional[str] = None,
              details: Optional[Dict[str, Any]] = None) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=code, message=message, field=field, details=details))
