from __future__ import annotations

from datetime import date

from flask import Blueprint, jsonify, request

from rentacar.api.dependencies import get_actor, get_origin, parse_args, parse_body
from rentacar.database import get_db
from rentacar.repositories.vehicle_repository import VehicleRepository
from rentacar.schemas.booking import (
    BookingResponse,
    BookingWithVehicleResponse,
    CheckinRequest,
    CheckoutRequest,
    CreateBookingRequest,
    SearchVehiclesQuery,
)
from rentacar.schemas.vehicle import VehicleResponse
from rentacar.services.booking_service import BookingService
from rentacar.utils.exceptions import ValidationError


bookings_bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


def _date_arg(name: str = "date") -> date:
    raw = (request.args.get(name) or "").strip()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Query parameter '{name}' must be an ISO date (YYYY-MM-DD)", field=name)


def _booking_json(booking) -> dict:
    return BookingResponse.model_validate(booking).model_dump(mode="json")


def _bookings_with_vehicles(db, bookings) -> list[dict]:
    vehicles = VehicleRepository(db)
    items = []
    for booking in bookings:
        item = BookingWithVehicleResponse.model_validate(booking)
        vehicle = vehicles.find_by_id(booking.vehicle_id)
        if vehicle is not None:
            item.vehicle = VehicleResponse.model_validate(vehicle)
        items.append(item.model_dump(mode="json"))
    return items


@bookings_bp.route("/search", methods=["GET"])
def search_available_vehicles():
    query = parse_args(SearchVehiclesQuery, "search")
    with get_db() as db:
        service = BookingService(db)
        vehicles = service.search_available_vehicles(
            category=query.category,
            location=query.location,
            start_date=query.start_date,
            end_date=query.end_date,
        )
        return jsonify([VehicleResponse.model_validate(v).model_dump(mode="json") for v in vehicles])


@bookings_bp.route("", methods=["POST"])
def create_booking():
    req = parse_body(CreateBookingRequest, "booking")
    with get_db() as db:
        service = BookingService(db)
        booking = service.create_booking(
            customer_id=req.customer_id,
            vehicle_id=req.vehicle_id,
            pickup_date=req.pickup_date,
            return_date=req.return_date,
            pickup_location=req.pickup_location,
            return_location=req.return_location,
            insurance=req.insurance,
            additional_driver=req.additional_driver,
            child_seat=req.child_seat,
            actor=get_actor(),
            origin=get_origin(),
        )
        return jsonify(_booking_json(booking)), 201


@bookings_bp.route("/<int:booking_id>/confirm", methods=["PUT"])
def confirm_booking(booking_id: int):
    with get_db() as db:
        booking = BookingService(db).confirm_booking(booking_id, actor=get_actor(), origin=get_origin())
        return jsonify(_booking_json(booking))


@bookings_bp.route("/<int:booking_id>/cancel", methods=["PUT"])
def cancel_booking(booking_id: int):
    with get_db() as db:
        booking = BookingService(db).cancel_booking(booking_id, actor=get_actor(), origin=get_origin())
        return jsonify(_booking_json(booking))


@bookings_bp.route("/<int:booking_id>/checkout", methods=["PUT"])
def checkout(booking_id: int):
    req = parse_body(CheckoutRequest, "checkout")
    with get_db() as db:
        booking = BookingService(db).checkout(
            booking_id,
            mileage=req.mileage,
            notes=req.notes,
            actor=get_actor(),
            origin=get_origin(),
        )
        return jsonify(_booking_json(booking))


@bookings_bp.route("/<int:booking_id>/checkin", methods=["PUT"])
def checkin(booking_id: int):
    req = parse_body(CheckinRequest, "checkin")
    with get_db() as db:
        booking = BookingService(db).checkin(
            booking_id,
            mileage=req.mileage,
            damage_present=req.damage_present,
            damage_notes=req.damage_notes,
            damage_cost=req.damage_cost,
            actual_return=req.actual_return_time,
            actor=get_actor(),
            origin=get_origin(),
        )
        return jsonify(_booking_json(booking))


@bookings_bp.route("", methods=["GET"])
def list_bookings():
    with get_db() as db:
        bookings = BookingService(db).get_all_bookings()
        return jsonify([_booking_json(b) for b in bookings])


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
def get_booking(booking_id: int):
    with get_db() as db:
        return jsonify(_booking_json(BookingService(db).get_booking(booking_id)))


@bookings_bp.route("/customer/<int:customer_id>", methods=["GET"])
def booking_history(customer_id: int):
    with get_db() as db:
        bookings = BookingService(db).get_booking_history(customer_id)
        return jsonify(_bookings_with_vehicles(db, bookings))


@bookings_bp.route("/pickups", methods=["GET"])
def pickups():
    day = _date_arg()
    with get_db() as db:
        return jsonify(_bookings_with_vehicles(db, BookingService(db).get_pickups_for_date(day)))


@bookings_bp.route("/returns", methods=["GET"])
def returns():
    day = _date_arg()
    with get_db() as db:
        return jsonify(_bookings_with_vehicles(db, BookingService(db).get_returns_for_date(day)))


@bookings_bp.route("/requests", methods=["GET"])
def requests_for_date():
    day = _date_arg()
    with get_db() as db:
        return jsonify(_bookings_with_vehicles(db, BookingService(db).get_requests_for_date(day)))
