import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from rentacar.database import Base
from rentacar.utils.exceptions import IllegalStateError, ValidationError

# Branch systems still send the legacy German category names
_CATEGORY_ALIASES = {
    "kleinwagen": "economy",
    "kompaktklasse": "compact",
    "mittelklasse": "midsize",
    "oberklasse": "premium",
    "sportwagen": "sports",
}


class VehicleCategory(str, enum.Enum):
    ECONOMY = "economy"
    COMPACT = "compact"
    MIDSIZE = "midsize"
    PREMIUM = "premium"
    SUV = "suv"
    VAN = "van"
    SPORTS = "sports"

    @property
    def display_name(self) -> str:
        return {
            "economy": "Economy",
            "compact": "Compact",
            "midsize": "Midsize",
            "premium": "Premium",
            "suv": "SUV",
            "van": "Van",
            "sports": "Sports Car",
        }.get(self.value, self.value)

    @classmethod
    def parse(cls, value) -> "VehicleCategory":
        """Accept an enum member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        raw = (str(value) if value is not None else "").strip().lower()
        raw = _CATEGORY_ALIASES.get(raw, raw)
        for category in cls:
            if raw in (category.value, category.name.lower()):
                return category
        allowed = [c.value for c in cls]
        raise ValidationError(
            f"Category must be one of: {allowed}",
            field="category",
            details={"allowed": allowed, "provided": value},
        )


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    OUT_OF_SERVICE = "out_of_service"

    @property
    def display_name(self) -> str:
        return {
            "available": "Available",
            "rented": "Rented",
            "out_of_service": "Out of Service",
        }.get(self.value, self.value)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    license_plate = Column(String(20), unique=True, nullable=False, index=True)  # normalized, e.g. "B-AB 123"
    brand = Column(String(50), nullable=False)
    model = Column(String(50), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    year = Column("model_year", Integer, nullable=True)
    mileage = Column(Integer, nullable=False, default=0)  # odometer in km, never decreases
    location = Column(String(100), nullable=False, index=True)  # home branch city
    daily_price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE.value, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Vehicle {self.id} {self.license_plate} {self.status}>"

    @property
    def is_available(self) -> bool:
        return self.status == VehicleStatus.AVAILABLE.value

    def mark_as_rented(self) -> None:
        if self.status != VehicleStatus.AVAILABLE.value:
            raise IllegalStateError(self.status, "rent vehicle", f"vehicle {self.license_plate} is not available")
        self.status = VehicleStatus.RENTED.value

    def mark_as_available(self) -> None:
        if self.status == VehicleStatus.AVAILABLE.value:
            return
        if self.status != VehicleStatus.RENTED.value:
            raise IllegalStateError(self.status, "release vehicle", f"vehicle {self.license_plate} is out of service")
        self.status = VehicleStatus.AVAILABLE.value

    def mark_out_of_service(self) -> None:
        if self.status != VehicleStatus.AVAILABLE.value:
            raise IllegalStateError(
                self.status,
                "take vehicle out of service",
                "only available vehicles can be taken out of service",
            )
        self.status = VehicleStatus.OUT_OF_SERVICE.value

    def update_mileage(self, new_mileage: Optional[int]) -> None:
        if new_mileage is None:
            return
        if new_mileage < (self.mileage or 0):
            raise ValidationError(
                "Mileage cannot be less than current vehicle mileage",
                field="mileage",
                details={"current_mileage": self.mileage, "provided": new_mileage},
            )
        self.mileage = new_mileage
