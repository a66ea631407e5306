"""
Rental pricing.

Pure functions only: no session, no clock. Every amount is a Decimal rounded
to cents so that repeated additions never drift.
"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from rentacar.models.vehicle import VehicleCategory
from rentacar.utils.exceptions import InvalidRangeError
from rentacar.utils.timezone import end_of_day, to_local_naive

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

DAILY_RATES = {
    VehicleCategory.ECONOMY: Decimal("30.00"),
    VehicleCategory.COMPACT: Decimal("40.00"),
    VehicleCategory.MIDSIZE: Decimal("60.00"),
    VehicleCategory.PREMIUM: Decimal("100.00"),
    VehicleCategory.SUV: Decimal("80.00"),
    VehicleCategory.VAN: Decimal("70.00"),
    VehicleCategory.SPORTS: Decimal("150.00"),
}

INSURANCE_PER_DAY = Decimal("10.00")
ADDITIONAL_DRIVER_PER_DAY = Decimal("5.00")
CHILD_SEAT_PER_DAY = Decimal("3.00")

MILEAGE_ALLOWANCE_PER_DAY = 300  # km
EXTRA_MILEAGE_PER_KM = Decimal("0.25")

LATE_FEE_PER_DAY = Decimal("50.00")

Mileage = Union[int, Decimal]


def _money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Mileage) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def rental_days(pickup_date: date, return_date: date) -> int:
    """Inclusive number of rental days; pickup and return on the same day is 1."""
    if pickup_date is None or return_date is None:
        raise InvalidRangeError("Pickup and return date are required")
    if pickup_date > return_date:
        raise InvalidRangeError(
            "Pickup date must not be after return date",
            field="pickup_date",
            details={"pickup_date": pickup_date.isoformat(), "return_date": return_date.isoformat()},
        )
    return (return_date - pickup_date).days + 1


def daily_rate(category) -> Decimal:
    return DAILY_RATES[VehicleCategory.parse(category)]


def base_price(category, pickup_date: date, return_date: date) -> Decimal:
    days = rental_days(pickup_date, return_date)
    return _money(daily_rate(category) * days)


def extras_cost(
    days: int,
    insurance: bool = False,
    additional_driver: bool = False,
    child_seat: bool = False,
) -> Decimal:
    if days < 1:
        raise InvalidRangeError("Minimum rental duration is 1 day", field="days", details={"days": days})

    extras = ZERO
    if insurance:
        extras += INSURANCE_PER_DAY * days
    if additional_driver:
        extras += ADDITIONAL_DRIVER_PER_DAY * days
    if child_seat:
        extras += CHILD_SEAT_PER_DAY * days
    return _money(extras)


def excess_mileage_cost(days: int, checkout_mileage: Optional[Mileage], checkin_mileage: Optional[Mileage]) -> Decimal:
    if checkout_mileage is None or checkin_mileage is None:
        return ZERO

    driven = _to_decimal(checkin_mileage) - _to_decimal(checkout_mileage)
    if driven <= 0:
        return ZERO

    allowance = Decimal(MILEAGE_ALLOWANCE_PER_DAY * days)
    excess = driven - allowance
    if excess <= 0:
        return ZERO
    return _money(excess * EXTRA_MILEAGE_PER_KM)


def late_fee(planned_return_date: Optional[date], actual_return: Optional[datetime]) -> Decimal:
    if planned_return_date is None or actual_return is None:
        return ZERO

    actual_return = to_local_naive(actual_return)
    deadline = end_of_day(planned_return_date)
    if actual_return <= deadline:
        return ZERO

    # Any lateness is charged as at least one full day
    days_late = max((actual_return - deadline).days, 1)
    return _money(LATE_FEE_PER_DAY * days_late)


def booking_price(category, pickup_date: date, return_date: date,
                  insurance: bool = False, additional_driver: bool = False,
                  child_seat: bool = False) -> tuple[Decimal, Decimal]:
    """Return (total_price, extras_cost) for a new booking."""
    base = base_price(category, pickup_date, return_date)
    extras = extras_cost(rental_days(pickup_date, return_date), insurance, additional_driver, child_seat)
    return _money(base + extras), extras
