from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rentacar.models.vehicle import VehicleCategory
from rentacar.utils.exceptions import ValidationError


def _validate_category(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    try:
        return VehicleCategory.parse(v).value
    except ValidationError as exc:
        raise ValueError(exc.message)


class CreateVehicleRequest(BaseModel):
    license_plate: str
    brand: str
    model: str
    category: str
    year: Optional[int] = None
    mileage: int = Field(default=0, ge=0)
    location: str
    daily_price: Decimal = Field(gt=0)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _validate_category(v)

    @field_validator("license_plate", "brand", "model", "location")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        normalized = (v or "").strip()
        if not normalized:
            raise ValueError("must not be empty")
        return normalized


class UpdateVehicleRequest(BaseModel):
    brand: Optional[str] = None
    model: Optional[str] = None
    category: Optional[str] = None
    year: Optional[int] = None
    location: Optional[str] = None
    daily_price: Optional[Decimal] = Field(default=None, gt=0)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: Optional[str]) -> Optional[str]:
        return _validate_category(v)


class VehicleResponse(BaseModel):
    id: int
    license_plate: str
    brand: str
    model: str
    category: str
    year: Optional[int] = None
    mileage: int
    location: str
    daily_price: Decimal
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
