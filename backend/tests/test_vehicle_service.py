"""Fleet management: adding, updating and retiring vehicles."""

from datetime import date
from decimal import Decimal

import pytest

from rentacar.models.vehicle import VehicleStatus
from rentacar.services.booking_service import BookingService
from rentacar.services.vehicle_service import VehicleService
from rentacar.utils.exceptions import ConflictError, IllegalStateError, NotFoundError, ValidationError


def _add(service, plate="b-ab 1234", **overrides):
    fields = dict(
        license_plate=plate,
        brand="BMW",
        model="320d",
        category="midsize",
        year=2021,
        mileage=50000,
        location="Berlin",
        daily_price="60",
    )
    fields.update(overrides)
    return service.add_vehicle(**fields)


def test_add_vehicle_normalizes_plate(db):
    service = VehicleService(db)
    vehicle = _add(service, plate="  b-ab   1234 ", actor="fleet")

    assert vehicle.id is not None
    assert vehicle.license_plate == "B-AB 1234"
    assert vehicle.status == VehicleStatus.AVAILABLE.value
    assert vehicle.daily_price == Decimal("60.00")
    assert service.get_vehicle_by_plate("B-AB 1234").id == vehicle.id

    logs = service.audit.list_for_entity("Vehicle", vehicle.id)
    assert [log.action for log in logs] == ["VEHICLE_ADDED"]
    assert logs[0].actor == "fleet"


def test_add_vehicle_duplicate_plate(db):
    service = VehicleService(db)
    _add(service)
    with pytest.raises(ConflictError):
        _add(service, plate="B-AB 1234")
    assert len(service.get_all_vehicles()) == 1


@pytest.mark.parametrize("overrides,field", [
    ({"plate": ""}, "license_plate"),
    ({"plate": "B_AB#1"}, "license_plate"),
    ({"category": "spaceship"}, "category"),
    ({"daily_price": "0"}, "daily_price"),
    ({"daily_price": "abc"}, "daily_price"),
    ({"mileage": -5}, "mileage"),
    ({"year": 1850}, "year"),
    ({"brand": "  "}, "brand"),
])
def test_add_vehicle_validation(db, overrides, field):
    service = VehicleService(db)
    with pytest.raises(ValidationError) as exc_info:
        _add(service, **overrides)
    assert exc_info.value.field == field


def test_add_vehicle_accepts_legacy_category(db):
    vehicle = _add(VehicleService(db), category="Mittelklasse")
    assert vehicle.category == "midsize"


def test_update_vehicle_changes_only_given_fields(db):
    service = VehicleService(db)
    vehicle = _add(service)

    updated = service.update_vehicle(vehicle.id, location=" Hamburg ", daily_price=Decimal("65.5"))

    assert updated.location == "Hamburg"
    assert updated.daily_price == Decimal("65.50")
    assert updated.brand == "BMW"
    assert updated.mileage == 50000
    log = service.audit.list_for_entity("Vehicle", vehicle.id)[0]
    assert log.action == "VEHICLE_UPDATED"
    assert log.audit_metadata == {"fields": ["location", "daily_price"]}


def test_update_unknown_vehicle(db):
    with pytest.raises(NotFoundError):
        VehicleService(db).update_vehicle(42, brand="Audi")


def test_set_out_of_service(db):
    service = VehicleService(db)
    vehicle = _add(service)
    retired = service.set_out_of_service(vehicle.id)
    assert retired.status == VehicleStatus.OUT_OF_SERVICE.value

    with pytest.raises(IllegalStateError):
        service.set_out_of_service(vehicle.id)


def test_rented_vehicle_cannot_go_out_of_service(db, make_customer):
    service = VehicleService(db)
    vehicle = _add(service)
    BookingService(db).create_booking(
        make_customer().id, vehicle.id, date(2025, 1, 10), date(2025, 1, 12),
        "Berlin", "Berlin", today=date(2025, 1, 1),
    )
    with pytest.raises(IllegalStateError):
        service.set_out_of_service(vehicle.id)


def test_get_vehicle_not_found(db):
    service = VehicleService(db)
    with pytest.raises(NotFoundError):
        service.get_vehicle(7)
    with pytest.raises(NotFoundError):
        service.get_vehicle_by_plate("HH-XY 1")
