import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text

from rentacar.database import Base
from rentacar.utils.exceptions import IllegalStateError, ValidationError
from rentacar.utils.timezone import hours_before, start_of_day

# Free cancellation ends this many hours before 00:00 on the pickup day.
CANCELLATION_NOTICE_HOURS = 24


class BookingStatus(str, enum.Enum):
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    @property
    def display_name(self) -> str:
        return {
            "requested": "Requested",
            "confirmed": "Confirmed",
            "cancelled": "Cancelled",
            "completed": "Completed",
        }.get(self.value, self.value)

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CANCELLED, BookingStatus.COMPLETED)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_vehicle_dates", "vehicle_id", "pickup_date", "return_date"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Loose references: a booking never owns its customer or vehicle
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)

    pickup_date = Column(Date, nullable=False, index=True)
    return_date = Column(Date, nullable=False, index=True)
    pickup_location = Column(String(100), nullable=False)
    return_location = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.REQUESTED.value, index=True)

    # Frozen at creation: base price + extras
    total_price = Column(Numeric(10, 2), nullable=False)
    extras_cost = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    insurance = Column(Boolean, nullable=False, default=False)
    additional_driver = Column(Boolean, nullable=False, default=False)
    child_seat = Column(Boolean, nullable=False, default=False)

    cancelled_at = Column(DateTime, nullable=True)

    # Handover
    checkout_at = Column(DateTime, nullable=True)
    checkout_mileage = Column(Integer, nullable=True)
    checkout_notes = Column(Text, nullable=True)

    # Return
    checkin_at = Column(DateTime, nullable=True)  # actual return time
    checkin_mileage = Column(Integer, nullable=True)
    damage_present = Column(Boolean, nullable=False, default=False)
    damage_notes = Column(Text, nullable=True)
    damage_cost = Column(Numeric(10, 2), nullable=True)
    extra_mileage_cost = Column(Numeric(10, 2), nullable=True)
    late_fee = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<Booking {self.id} vehicle={self.vehicle_id} {self.pickup_date}..{self.return_date} {self.status}>"

    @property
    def rental_days(self) -> int:
        """Inclusive day count; a same-day rental is one day."""
        return (self.return_date - self.pickup_date).days + 1

    @property
    def is_checked_out(self) -> bool:
        return self.checkout_at is not None

    @property
    def is_checked_in(self) -> bool:
        return self.checkin_at is not None

    @property
    def cancellation_deadline(self) -> datetime:
        return hours_before(start_of_day(self.pickup_date), CANCELLATION_NOTICE_HOURS)

    @property
    def final_price(self) -> Decimal:
        """Rental price plus everything charged at return."""
        amount = Decimal(self.total_price or 0)
        for charge in (self.extra_mileage_cost, self.late_fee, self.damage_cost):
            if charge is not None:
                amount += Decimal(charge)
        return amount.quantize(Decimal("0.01"))

    def confirm(self) -> None:
        if self.status != BookingStatus.REQUESTED.value:
            raise IllegalStateError(self.status, "confirm booking", "only requested bookings can be confirmed")
        self.status = BookingStatus.CONFIRMED.value

    def cancel(self, now: datetime) -> None:
        if BookingStatus(self.status).is_terminal:
            raise IllegalStateError(self.status, "cancel booking", "booking can no longer be cancelled")
        if self.is_checked_out:
            raise IllegalStateError(self.status, "cancel booking", "vehicle has already been handed over")
        if now > self.cancellation_deadline:
            raise IllegalStateError(
                self.status,
                "cancel booking",
                f"cancellation is only possible until {self.cancellation_deadline.isoformat()}",
            )
        self.status = BookingStatus.CANCELLED.value
        self.cancelled_at = now

    def check_can_checkout(self) -> None:
        if self.status != BookingStatus.CONFIRMED.value:
            raise IllegalStateError(self.status, "check out", "check-out is only allowed for confirmed bookings")
        if self.is_checked_out:
            raise IllegalStateError(self.status, "check out", "booking has already been checked out")

    def record_checkout(self, mileage: int, notes: Optional[str], at: datetime) -> None:
        self.check_can_checkout()
        self.checkout_at = at
        self.checkout_mileage = mileage
        self.checkout_notes = notes

    def check_can_checkin(self, mileage: int) -> None:
        if self.is_checked_in:
            raise IllegalStateError(self.status, "check in", "booking has already been checked in")
        if not self.is_checked_out:
            raise IllegalStateError(self.status, "check in", "booking must first be checked out")
        if self.checkout_mileage is not None and mileage < self.checkout_mileage:
            raise ValidationError(
                "Mileage cannot be less than checkout mileage",
                field="mileage",
                details={"checkout_mileage": self.checkout_mileage, "provided": mileage},
            )

    def record_checkin(
        self,
        mileage: int,
        at: datetime,
        damage_present: bool,
        damage_notes: Optional[str],
        damage_cost: Decimal,
        extra_mileage_cost: Decimal,
        late_fee: Decimal,
    ) -> None:
        self.check_can_checkin(mileage)
        self.checkin_at = at
        self.checkin_mileage = mileage
        self.damage_present = damage_present
        self.damage_notes = damage_notes
        self.damage_cost = damage_cost
        self.extra_mileage_cost = extra_mileage_cost
        self.late_fee = late_fee
        self._complete()

    def _complete(self) -> None:
        self.status = BookingStatus.COMPLETED.value
