from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from sqlalchemy.orm import Session

from rentacar.database import transaction
from rentacar.models.vehicle import Vehicle, VehicleCategory, VehicleStatus
from rentacar.repositories.vehicle_repository import VehicleRepository
from rentacar.services.audit_service import AuditService
from rentacar.utils.exceptions import ConflictError, ValidationError, VehicleNotFoundError
from rentacar.utils.license_plate import normalize_license_plate

logger = logging.getLogger(__name__)


class VehicleService:
    def __init__(self, db: Session):
        self.db = db
        self.vehicles = VehicleRepository(db)
        self.audit = AuditService(db)

    def _validate_daily_price(self, daily_price) -> Decimal:
        try:
            price = Decimal(str(daily_price))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("Daily price must be a number", field="daily_price", details={"provided": daily_price})
        if price <= 0:
            raise ValidationError("Daily price must be greater than 0", field="daily_price", details={"provided": daily_price})
        return price.quantize(Decimal("0.01"))

    def _validate_year(self, year: Optional[int]) -> Optional[int]:
        if year is None:
            return None
        if year < 1900 or year > 2100:
            raise ValidationError("Model year is out of range", field="year", details={"provided": year})
        return year

    def add_vehicle(
        self,
        license_plate: str,
        brand: str,
        model: str,
        category,
        year: Optional[int],
        mileage: int,
        location: str,
        daily_price,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Vehicle:
        plate = normalize_license_plate(license_plate)
        category_enum = VehicleCategory.parse(category)
        if mileage is None or mileage < 0:
            raise ValidationError("Mileage must not be negative", field="mileage", details={"provided": mileage})
        price = self._validate_daily_price(daily_price)

        brand_norm = (brand or "").strip()
        model_norm = (model or "").strip()
        location_norm = (location or "").strip()
        for field, value in (("brand", brand_norm), ("model", model_norm), ("location", location_norm)):
            if not value:
                raise ValidationError(f"{field.capitalize()} is required", field=field)

        with transaction(self.db):
            if self.vehicles.find_by_plate(plate):
                raise ConflictError(
                    f"A vehicle with license plate {plate} already exists",
                    details={"license_plate": plate},
                )

            vehicle = Vehicle(
                license_plate=plate,
                brand=brand_norm,
                model=model_norm,
                category=category_enum.value,
                year=self._validate_year(year),
                mileage=int(mileage),
                location=location_norm,
                daily_price=price,
                status=VehicleStatus.AVAILABLE.value,
            )
            self.vehicles.save(vehicle)
            self.audit.log_vehicle_action(
                vehicle.id, "VEHICLE_ADDED", actor, detail=f"Vehicle added: {plate}", origin=origin
            )

        self.db.refresh(vehicle)
        logger.info(f"Vehicle {vehicle.id} added ({plate}, {category_enum.value}, {location_norm})")
        return vehicle

    def update_vehicle(
        self,
        vehicle_id: int,
        brand: Optional[str] = None,
        model: Optional[str] = None,
        category=None,
        year: Optional[int] = None,
        location: Optional[str] = None,
        daily_price=None,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Vehicle:
        """Partial update of descriptive attributes; status and mileage are owned by the booking lifecycle."""
        with transaction(self.db):
            vehicle = self.vehicles.find_by_id(vehicle_id, for_update=True)
            if not vehicle:
                raise VehicleNotFoundError(vehicle_id)

            changed = []
            if brand is not None and brand.strip():
                vehicle.brand = brand.strip()
                changed.append("brand")
            if model is not None and model.strip():
                vehicle.model = model.strip()
                changed.append("model")
            if category is not None:
                vehicle.category = VehicleCategory.parse(category).value
                changed.append("category")
            if year is not None:
                vehicle.year = self._validate_year(year)
                changed.append("year")
            if location is not None and location.strip():
                vehicle.location = location.strip()
                changed.append("location")
            if daily_price is not None:
                vehicle.daily_price = self._validate_daily_price(daily_price)
                changed.append("daily_price")

            self.vehicles.save(vehicle)
            self.audit.log_vehicle_action(
                vehicle.id,
                "VEHICLE_UPDATED",
                actor,
                detail=f"Vehicle updated: {vehicle.license_plate}",
                origin=origin,
                audit_metadata={"fields": changed},
            )

        self.db.refresh(vehicle)
        return vehicle

    def set_out_of_service(self, vehicle_id: int, actor: Optional[str] = None, origin: Optional[str] = None) -> Vehicle:
        with transaction(self.db):
            vehicle = self.vehicles.find_by_id(vehicle_id, for_update=True)
            if not vehicle:
                raise VehicleNotFoundError(vehicle_id)

            vehicle.mark_out_of_service()
            self.vehicles.save(vehicle)
            self.audit.log_vehicle_action(
                vehicle.id,
                "VEHICLE_OUT_OF_SERVICE",
                actor,
                detail=f"Vehicle taken out of service: {vehicle.license_plate}",
                origin=origin,
            )

        self.db.refresh(vehicle)
        logger.info(f"Vehicle {vehicle_id} taken out of service")
        return vehicle

    def get_all_vehicles(self) -> List[Vehicle]:
        return self.vehicles.find_all()

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = self.vehicles.find_by_id(vehicle_id)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    def get_vehicle_by_plate(self, license_plate: str) -> Vehicle:
        plate = normalize_license_plate(license_plate)
        vehicle = self.vehicles.find_by_plate(plate)
        if not vehicle:
            raise VehicleNotFoundError(plate)
        return vehicle
