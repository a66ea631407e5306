from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from rentacar.schemas.vehicle import VehicleResponse


def _strip_optional(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    normalized = v.strip()
    return normalized or None


class SearchVehiclesQuery(BaseModel):
    category: Optional[str] = None
    location: Optional[str] = None
    start_date: date
    end_date: date

    @field_validator("category", "location")
    @classmethod
    def validate_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class CreateBookingRequest(BaseModel):
    customer_id: int
    vehicle_id: int
    pickup_date: date
    return_date: date
    pickup_location: str
    return_location: str
    insurance: bool = False
    additional_driver: bool = False
    child_seat: bool = False

    @field_validator("pickup_location", "return_location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        normalized = (v or "").strip()
        if not normalized:
            raise ValueError("location must not be empty")
        return normalized


class CheckoutRequest(BaseModel):
    mileage: int = Field(gt=0)
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class CheckinRequest(BaseModel):
    mileage: int = Field(gt=0)
    damage_present: bool = False
    damage_notes: Optional[str] = None
    damage_cost: Optional[Decimal] = Field(default=None, ge=0)
    actual_return_time: Optional[datetime] = None

    @field_validator("damage_notes")
    @classmethod
    def validate_damage_notes(cls, v: Optional[str]) -> Optional[str]:
        return _strip_optional(v)


class BookingResponse(BaseModel):
    id: int
    customer_id: int
    vehicle_id: int
    pickup_date: date
    return_date: date
    pickup_location: str
    return_location: str
    status: str
    rental_days: int
    total_price: Decimal
    extras_cost: Decimal
    insurance: bool
    additional_driver: bool
    child_seat: bool
    cancelled_at: Optional[datetime] = None
    checkout_at: Optional[datetime] = None
    checkout_mileage: Optional[int] = None
    checkout_notes: Optional[str] = None
    checkin_at: Optional[datetime] = None
    checkin_mileage: Optional[int] = None
    damage_present: bool = False
    damage_notes: Optional[str] = None
    damage_cost: Optional[Decimal] = None
    extra_mileage_cost: Optional[Decimal] = None
    late_fee: Optional[Decimal] = None
    final_price: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingWithVehicleResponse(BookingResponse):
    vehicle: Optional[VehicleResponse] = None
