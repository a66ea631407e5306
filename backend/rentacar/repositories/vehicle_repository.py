from datetime import date
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from rentacar.models.booking import Booking, BookingStatus
from rentacar.models.vehicle import Vehicle, VehicleCategory, VehicleStatus


class VehicleRepository:
    """Vehicle lookups and the overlap-aware availability query."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, vehicle_id: int, for_update: bool = False) -> Optional[Vehicle]:
        query = self.db.query(Vehicle).filter(Vehicle.id == vehicle_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by_plate(self, license_plate: str) -> Optional[Vehicle]:
        return self.db.query(Vehicle).filter(Vehicle.license_plate == license_plate).first()

    def find_all(self) -> List[Vehicle]:
        return self.db.query(Vehicle).order_by(Vehicle.id).all()

    def save(self, vehicle: Vehicle) -> Vehicle:
        self.db.add(vehicle)
        self.db.flush()  # assigns vehicle.id inside the open transaction
        return vehicle

    def find_available(
        self,
        category: Optional[VehicleCategory],
        location: Optional[str],
        start_date: date,
        end_date: date,
    ) -> List[Vehicle]:
        """Available vehicles with no CONFIRMED booking overlapping [start_date, end_date]."""
        booked_vehicle_ids = select(Booking.vehicle_id).where(
            and_(
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.pickup_date <= end_date,
                Booking.return_date >= start_date,
            )
        )

        filters = [
            Vehicle.status == VehicleStatus.AVAILABLE.value,
            Vehicle.id.not_in(booked_vehicle_ids),
        ]
        if category is not None:
            filters.append(Vehicle.category == VehicleCategory.parse(category).value)
        location_norm = (location or "").strip()
        if location_norm:
            filters.append(func.upper(Vehicle.location) == location_norm.upper())

        return (
            self.db.query(Vehicle)
            .filter(and_(*filters))
            .order_by(Vehicle.daily_price, Vehicle.id)
            .all()
        )
