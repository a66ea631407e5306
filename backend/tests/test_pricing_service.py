"""Tests for rental price, extras, excess mileage and late fees"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rentacar.models.vehicle import VehicleCategory
from rentacar.services import pricing_service as pricing
from rentacar.utils.exceptions import InvalidRangeError, ValidationError


def test_rental_days_is_inclusive():
    assert pricing.rental_days(date(2025, 1, 10), date(2025, 1, 10)) == 1
    assert pricing.rental_days(date(2025, 1, 10), date(2025, 1, 12)) == 3


def test_rental_days_rejects_reversed_range():
    with pytest.raises(InvalidRangeError) as exc_info:
        pricing.rental_days(date(2025, 1, 12), date(2025, 1, 10))
    assert exc_info.value.code == "INVALID_RANGE"
    # Range violations are still input errors for callers
    assert isinstance(exc_info.value, ValidationError)


@pytest.mark.parametrize("category,rate", [
    (VehicleCategory.ECONOMY, "30.00"),
    (VehicleCategory.COMPACT, "40.00"),
    (VehicleCategory.MIDSIZE, "60.00"),
    (VehicleCategory.PREMIUM, "100.00"),
    (VehicleCategory.SUV, "80.00"),
    (VehicleCategory.VAN, "70.00"),
    (VehicleCategory.SPORTS, "150.00"),
])
def test_daily_rates(category, rate):
    assert pricing.daily_rate(category) == Decimal(rate)


def test_base_price_is_rate_times_days():
    assert pricing.base_price("midsize", date(2025, 1, 10), date(2025, 1, 12)) == Decimal("180.00")
    assert pricing.base_price(VehicleCategory.SPORTS, date(2025, 1, 10), date(2025, 1, 10)) == Decimal("150.00")


def test_base_price_accepts_legacy_category_name():
    assert pricing.base_price("MITTELKLASSE", date(2025, 1, 10), date(2025, 1, 12)) == Decimal("180.00")


def test_base_price_unknown_category():
    with pytest.raises(ValidationError) as exc_info:
        pricing.base_price("limousine", date(2025, 1, 10), date(2025, 1, 12))
    assert exc_info.value.field == "category"


def test_extras_all_options_two_days():
    assert pricing.extras_cost(2, insurance=True, additional_driver=True, child_seat=True) == Decimal("36.00")


def test_extras_none_selected():
    assert pricing.extras_cost(5) == Decimal("0.00")


def test_extras_are_additive_and_monotonic_in_days():
    for days in range(1, 15):
        together = pricing.extras_cost(days, True, True, True)
        separately = (
            pricing.extras_cost(days, insurance=True)
            + pricing.extras_cost(days, additional_driver=True)
            + pricing.extras_cost(days, child_seat=True)
        )
        assert together == separately
        assert pricing.extras_cost(days + 1, True, True, True) > together


def test_extras_reject_zero_days():
    with pytest.raises(InvalidRangeError):
        pricing.extras_cost(0, insurance=True)


def test_excess_mileage_charged_beyond_allowance():
    # 700 km driven, 600 km included
    assert pricing.excess_mileage_cost(2, 10000, 10700) == Decimal("25.00")


def test_excess_mileage_within_allowance():
    assert pricing.excess_mileage_cost(2, 10000, 10600) == Decimal("0.00")
    assert pricing.excess_mileage_cost(1, 10000, 10000) == Decimal("0.00")


def test_excess_mileage_missing_readings():
    assert pricing.excess_mileage_cost(2, None, 10700) == Decimal("0.00")
    assert pricing.excess_mileage_cost(2, 10000, None) == Decimal("0.00")


def test_late_fee_next_day_is_one_day():
    assert pricing.late_fee(date(2025, 1, 10), datetime(2025, 1, 11, 12, 0)) == Decimal("50.00")


def test_late_fee_on_time():
    assert pricing.late_fee(date(2025, 1, 10), datetime(2025, 1, 10, 12, 0)) == Decimal("0.00")
    assert pricing.late_fee(date(2025, 1, 10), datetime(2025, 1, 10, 23, 59, 59)) == Decimal("0.00")


def test_late_fee_counts_whole_days():
    # Just over three days past the deadline
    late = datetime(2025, 1, 10, 23, 59, 59) + timedelta(days=3, hours=2)
    assert pricing.late_fee(date(2025, 1, 10), late) == Decimal("150.00")


def test_late_fee_accepts_aware_datetime():
    returned = datetime(2025, 1, 20, 12, 0, tzinfo=timezone.utc)
    assert pricing.late_fee(date(2025, 1, 10), returned) > Decimal("0.00")


def test_late_fee_without_return_time():
    assert pricing.late_fee(date(2025, 1, 10), None) == Decimal("0.00")


def test_booking_price_includes_extras():
    total, extras = pricing.booking_price(
        "economy", date(2025, 1, 10), date(2025, 1, 11), insurance=True, child_seat=True
    )
    assert extras == Decimal("26.00")
    assert total == Decimal("86.00")
