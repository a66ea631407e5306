from __future__ import annotations

import logging
import math
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from rentacar.database import transaction
from rentacar.models.booking import Booking, BookingStatus
from rentacar.models.customer import Customer
from rentacar.models.vehicle import Vehicle, VehicleCategory
from rentacar.repositories.booking_repository import BookingRepository
from rentacar.repositories.vehicle_repository import VehicleRepository
from rentacar.services.audit_service import AuditService
from rentacar.services.pricing_service import (
    CENT,
    ZERO,
    booking_price,
    excess_mileage_cost,
    late_fee,
)
from rentacar.utils.exceptions import (
    BookingNotFoundError,
    CustomerNotFoundError,
    ValidationError,
    VehicleNotFoundError,
    VehicleUnavailableError,
)
from rentacar.utils.timezone import local_now, local_today, to_local_naive

logger = logging.getLogger(__name__)


class BookingService:
    """Booking lifecycle: search, reserve, confirm, cancel, hand over and take back.

    Every mutating use case is one unit of work on ``db``: rows are locked on
    load, and the session is committed at the end or rolled back on the first
    error, so the availability check and the status change cannot be split by
    a competing request.
    """

    def __init__(self, db: Session):
        self.db = db
        self.bookings = BookingRepository(db)
        self.vehicles = VehicleRepository(db)
        self.audit = AuditService(db)

    # --- helpers ---

    def _validate_date_range(self, start_date: Optional[date], end_date: Optional[date],
                             today: Optional[date] = None) -> None:
        if start_date is None or end_date is None:
            raise ValidationError(
                "Pickup and return date are required",
                field="pickup_date" if start_date is None else "return_date",
            )
        today = today or local_today()
        if start_date < today:
            raise ValidationError(
                "Pickup date must not be in the past",
                field="pickup_date",
                details={"pickup_date": start_date.isoformat(), "today": today.isoformat()},
            )
        if start_date > end_date:
            raise ValidationError(
                "Pickup date must not be after return date",
                field="pickup_date",
                details={"pickup_date": start_date.isoformat(), "return_date": end_date.isoformat()},
            )

    def _validate_mileage(self, mileage) -> int:
        whole = isinstance(mileage, int) and not isinstance(mileage, bool)
        if isinstance(mileage, (float, Decimal)):
            whole = math.isfinite(mileage) and mileage == int(mileage)
        if not whole:
            raise ValidationError("Mileage must be whole kilometres", field="mileage", details={"provided": str(mileage)})
        if mileage <= 0:
            raise ValidationError("Mileage must be greater than 0", field="mileage", details={"provided": str(mileage)})
        return int(mileage)

    def _require_text(self, value: Optional[str], field: str) -> str:
        normalized = (value or "").strip()
        if not normalized:
            raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required", field=field)
        return normalized

    def _get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.find_by_id(booking_id, for_update=True)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    def _get_vehicle(self, vehicle_id: int) -> Vehicle:
        vehicle = self.vehicles.find_by_id(vehicle_id, for_update=True)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle

    def is_vehicle_available(self, vehicle_id: int, start_date: date, end_date: date,
                             ignore_booking_id: Optional[int] = None) -> bool:
        """True when no CONFIRMED booking of the vehicle overlaps [start_date, end_date]."""
        overlapping = self.bookings.find_overlapping(vehicle_id, start_date, end_date, (BookingStatus.CONFIRMED,))
        return not any(b.id != ignore_booking_id for b in overlapping)

    # --- use cases ---

    def search_available_vehicles(
        self,
        category,
        location: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        today: Optional[date] = None,
    ) -> List[Vehicle]:
        self._validate_date_range(start_date, end_date, today)
        category_enum = VehicleCategory.parse(category) if category is not None else None
        return self.vehicles.find_available(category_enum, location, start_date, end_date)

    def create_booking(
        self,
        customer_id: int,
        vehicle_id: int,
        pickup_date: Optional[date],
        return_date: Optional[date],
        pickup_location: Optional[str],
        return_location: Optional[str],
        insurance: bool = False,
        additional_driver: bool = False,
        child_seat: bool = False,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Booking:
        """Reserve a vehicle and confirm the reservation in the same transaction."""
        self._validate_date_range(pickup_date, return_date, today)
        pickup_location = self._require_text(pickup_location, "pickup_location")
        return_location = self._require_text(return_location, "return_location")

        with transaction(self.db):
            if self.db.get(Customer, customer_id) is None:
                raise CustomerNotFoundError(customer_id)
            vehicle = self._get_vehicle(vehicle_id)

            if not self.is_vehicle_available(vehicle.id, pickup_date, return_date):
                logger.warning(
                    f"Rejected booking for vehicle {vehicle.license_plate}: "
                    f"already booked between {pickup_date} and {return_date}"
                )
                raise VehicleUnavailableError(vehicle.id, pickup_date, return_date)

            total_price, extras = booking_price(
                vehicle.category, pickup_date, return_date, insurance, additional_driver, child_seat
            )

            booking = Booking(
                customer_id=customer_id,
                vehicle_id=vehicle.id,
                pickup_date=pickup_date,
                return_date=return_date,
                pickup_location=pickup_location,
                return_location=return_location,
                status=BookingStatus.REQUESTED.value,
                total_price=total_price,
                extras_cost=extras,
                insurance=bool(insurance),
                additional_driver=bool(additional_driver),
                child_seat=bool(child_seat),
            )
            self.bookings.save(booking)
            self.audit.log_booking_action(
                booking.id,
                "BOOKING_CREATED",
                actor,
                detail=f"Booking created for vehicle {vehicle.license_plate}",
                origin=origin,
                audit_metadata={"total_price": str(total_price), "extras_cost": str(extras)},
            )

            # Auto-confirm; mark_as_rented refuses a vehicle that stopped being available
            booking.confirm()
            vehicle.mark_as_rented()
            self.bookings.save(booking)
            self.vehicles.save(vehicle)
            self.audit.log_booking_action(
                booking.id, "BOOKING_CONFIRMED", actor, detail="Booking confirmed automatically", origin=origin
            )

        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} confirmed for vehicle {vehicle_id} ({pickup_date} - {return_date}), total {total_price}")
        return booking

    def confirm_booking(self, booking_id: int, actor: Optional[str] = None, origin: Optional[str] = None) -> Booking:
        with transaction(self.db):
            booking = self._get_booking(booking_id)
            vehicle = self._get_vehicle(booking.vehicle_id)

            # Re-check: another booking may have been confirmed since this one was requested
            if not self.is_vehicle_available(vehicle.id, booking.pickup_date, booking.return_date,
                                             ignore_booking_id=booking.id):
                logger.warning(f"Cannot confirm booking {booking_id}: vehicle {vehicle.license_plate} no longer available")
                raise VehicleUnavailableError(vehicle.id, booking.pickup_date, booking.return_date)

            booking.confirm()
            vehicle.mark_as_rented()
            self.bookings.save(booking)
            self.vehicles.save(vehicle)
            self.audit.log_booking_action(booking.id, "BOOKING_CONFIRMED", actor, detail="Booking confirmed", origin=origin)

        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} confirmed")
        return booking

    def cancel_booking(
        self,
        booking_id: int,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Booking:
        now = now or local_now()
        with transaction(self.db):
            booking = self._get_booking(booking_id)
            held_vehicle = booking.status == BookingStatus.CONFIRMED.value

            booking.cancel(now)

            if held_vehicle:
                vehicle = self._get_vehicle(booking.vehicle_id)
                vehicle.mark_as_available()
                self.vehicles.save(vehicle)

            self.bookings.save(booking)
            self.audit.log_booking_action(booking.id, "BOOKING_CANCELLED", actor, detail="Booking cancelled", origin=origin)

        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} cancelled")
        return booking

    def checkout(
        self,
        booking_id: int,
        mileage: int,
        notes: Optional[str] = None,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Hand the vehicle over to the customer."""
        mileage = self._validate_mileage(mileage)
        now = now or local_now()

        with transaction(self.db):
            booking = self._get_booking(booking_id)
            booking.check_can_checkout()

            vehicle = self._get_vehicle(booking.vehicle_id)
            if mileage < (vehicle.mileage or 0):
                raise ValidationError(
                    "Mileage cannot be less than current vehicle mileage",
                    field="mileage",
                    details={"current_mileage": vehicle.mileage, "provided": mileage},
                )

            booking.record_checkout(mileage, (notes or "").strip() or None, now)
            vehicle.update_mileage(max(vehicle.mileage or 0, mileage))
            # Vehicle stays RENTED until checkin
            self.vehicles.save(vehicle)
            self.bookings.save(booking)
            self.audit.log_booking_action(
                booking.id,
                "BOOKING_CHECKED_OUT",
                actor,
                detail=f"Vehicle {vehicle.license_plate} handed over at {mileage} km",
                origin=origin,
            )

        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} checked out at {mileage} km")
        return booking

    def checkin(
        self,
        booking_id: int,
        mileage: int,
        damage_present: bool = False,
        damage_notes: Optional[str] = None,
        damage_cost: Optional[Decimal] = None,
        actual_return: Optional[datetime] = None,
        actor: Optional[str] = None,
        origin: Optional[str] = None,
    ) -> Booking:
        """Take the vehicle back, charge extra mileage, lateness and damage, and complete the booking."""
        mileage = self._validate_mileage(mileage)
        if damage_cost is not None and Decimal(str(damage_cost)) < 0:
            raise ValidationError("Damage cost must not be negative", field="damage_cost")

        with transaction(self.db):
            booking = self._get_booking(booking_id)
            booking.check_can_checkin(mileage)

            returned_at = to_local_naive(actual_return) or local_now()
            extra_mileage = excess_mileage_cost(booking.rental_days, booking.checkout_mileage, mileage)
            fee = late_fee(booking.return_date, returned_at)
            damage = ZERO
            if damage_present and damage_cost is not None:
                damage = Decimal(str(damage_cost)).quantize(CENT)

            booking.record_checkin(
                mileage=mileage,
                at=returned_at,
                damage_present=bool(damage_present),
                damage_notes=(damage_notes or "").strip() or None,
                damage_cost=damage,
                extra_mileage_cost=extra_mileage,
                late_fee=fee,
            )

            vehicle = self._get_vehicle(booking.vehicle_id)
            vehicle.update_mileage(mileage)
            vehicle.mark_as_available()
            self.vehicles.save(vehicle)
            self.bookings.save(booking)
            self.audit.log_booking_action(
                booking.id,
                "BOOKING_CHECKED_IN",
                actor,
                detail=f"Vehicle {vehicle.license_plate} returned at {mileage} km",
                origin=origin,
                audit_metadata={
                    "extra_mileage_cost": str(extra_mileage),
                    "late_fee": str(fee),
                    "damage_cost": str(damage),
                },
            )

        self.db.refresh(booking)
        logger.info(
            f"Booking {booking_id} completed: extra mileage {extra_mileage}, late fee {fee}, damage {damage}"
        )
        return booking

    # --- queries ---

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.bookings.find_by_id(booking_id)
        if not booking:
            raise BookingNotFoundError(booking_id)
        return booking

    def get_pickups_for_date(self, day: date) -> List[Booking]:
        return self.bookings.find_by_pickup_date(day, (BookingStatus.CONFIRMED,))

    def get_returns_for_date(self, day: date) -> List[Booking]:
        return self.bookings.find_by_return_date(day, (BookingStatus.CONFIRMED,))

    def get_requests_for_date(self, day: date) -> List[Booking]:
        return self.bookings.find_by_pickup_date(day, (BookingStatus.REQUESTED,))

    def get_booking_history(self, customer_id: int) -> List[Booking]:
        return self.bookings.find_by_customer_id(customer_id)

    def get_all_bookings(self) -> List[Booking]:
        return self.bookings.find_all()
