"""State rules on the Booking and Vehicle entities, without a database."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from rentacar.models.booking import Booking, BookingStatus
from rentacar.models.vehicle import Vehicle, VehicleCategory, VehicleStatus
from rentacar.utils.exceptions import ConflictError, IllegalStateError, ValidationError


def _booking(status=BookingStatus.CONFIRMED.value, **kwargs):
    return Booking(
        customer_id=1,
        vehicle_id=1,
        pickup_date=date(2025, 1, 10),
        return_date=date(2025, 1, 12),
        pickup_location="Berlin",
        return_location="Berlin",
        status=status,
        total_price=Decimal("180.00"),
        extras_cost=Decimal("0.00"),
        **kwargs,
    )


def _vehicle(status=VehicleStatus.AVAILABLE.value, mileage=1000):
    return Vehicle(license_plate="B-AB 1", brand="VW", model="Golf", category="compact",
                   mileage=mileage, location="Berlin", daily_price=Decimal("40.00"), status=status)


def test_category_parse():
    assert VehicleCategory.parse("SUV") is VehicleCategory.SUV
    assert VehicleCategory.parse(" midsize ") is VehicleCategory.MIDSIZE
    assert VehicleCategory.parse("MITTELKLASSE") is VehicleCategory.MIDSIZE
    assert VehicleCategory.parse(VehicleCategory.VAN) is VehicleCategory.VAN
    with pytest.raises(ValidationError):
        VehicleCategory.parse(None)
    assert VehicleCategory.SPORTS.display_name == "Sports Car"


def test_status_terminal():
    assert BookingStatus.CANCELLED.is_terminal
    assert BookingStatus.COMPLETED.is_terminal
    assert not BookingStatus.CONFIRMED.is_terminal


def test_cancellation_deadline_is_day_before_pickup():
    assert _booking().cancellation_deadline == datetime(2025, 1, 9, 0, 0)


def test_cancel_rules():
    booking = _booking()
    with pytest.raises(IllegalStateError):
        booking.cancel(datetime(2025, 1, 9, 0, 0, 1))
    booking.cancel(datetime(2025, 1, 8, 12, 0))
    assert booking.status == BookingStatus.CANCELLED.value
    with pytest.raises(IllegalStateError):
        booking.cancel(datetime(2025, 1, 8, 12, 0))


def test_illegal_state_is_a_conflict():
    booking = _booking(status=BookingStatus.REQUESTED.value)
    with pytest.raises(ConflictError) as exc_info:
        booking.check_can_checkout()
    assert exc_info.value.code == "ILLEGAL_STATE"
    assert exc_info.value.status_code == 409


def test_checkout_then_checkin_completes():
    booking = _booking()
    booking.record_checkout(500, None, datetime(2025, 1, 10, 9, 0))
    assert booking.is_checked_out
    with pytest.raises(IllegalStateError):
        booking.record_checkout(600, None, datetime(2025, 1, 10, 9, 0))

    with pytest.raises(ValidationError):
        booking.check_can_checkin(499)

    booking.record_checkin(
        mileage=900,
        at=datetime(2025, 1, 12, 18, 0),
        damage_present=False,
        damage_notes=None,
        damage_cost=Decimal("0.00"),
        extra_mileage_cost=Decimal("0.00"),
        late_fee=Decimal("0.00"),
    )
    assert booking.status == BookingStatus.COMPLETED.value
    with pytest.raises(IllegalStateError):
        booking.check_can_checkin(1000)


def test_final_price_adds_return_charges():
    booking = _booking(extra_mileage_cost=Decimal("25.00"), late_fee=Decimal("50.00"), damage_cost=None)
    assert booking.final_price == Decimal("255.00")
    assert _booking().final_price == Decimal("180.00")


def test_vehicle_status_transitions():
    vehicle = _vehicle()
    vehicle.mark_as_rented()
    assert vehicle.status == VehicleStatus.RENTED.value
    with pytest.raises(IllegalStateError):
        vehicle.mark_as_rented()
    with pytest.raises(IllegalStateError):
        vehicle.mark_out_of_service()

    vehicle.mark_as_available()
    vehicle.mark_as_available()
    assert vehicle.is_available

    vehicle.mark_out_of_service()
    with pytest.raises(IllegalStateError):
        vehicle.mark_as_available()


def test_vehicle_mileage_never_decreases():
    vehicle = _vehicle(mileage=1000)
    vehicle.update_mileage(None)
    assert vehicle.mileage == 1000
    vehicle.update_mileage(1200)
    assert vehicle.mileage == 1200
    with pytest.raises(ValidationError):
        vehicle.update_mileage(1100)
