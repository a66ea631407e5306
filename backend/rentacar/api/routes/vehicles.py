from __future__ import annotations

from flask import Blueprint, jsonify

from rentacar.api.dependencies import get_actor, get_origin, parse_body
from rentacar.database import get_db
from rentacar.schemas.audit import AuditLogResponse
from rentacar.schemas.vehicle import CreateVehicleRequest, UpdateVehicleRequest, VehicleResponse
from rentacar.services.audit_service import AuditService
from rentacar.services.vehicle_service import VehicleService


vehicles_bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


def _vehicle_json(vehicle) -> dict:
    return VehicleResponse.model_validate(vehicle).model_dump(mode="json")


@vehicles_bp.route("", methods=["GET"])
def list_vehicles():
    with get_db() as db:
        return jsonify([_vehicle_json(v) for v in VehicleService(db).get_all_vehicles()])


@vehicles_bp.route("/<int:vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id: int):
    with get_db() as db:
        return jsonify(_vehicle_json(VehicleService(db).get_vehicle(vehicle_id)))


@vehicles_bp.route("", methods=["POST"])
def add_vehicle():
    req = parse_body(CreateVehicleRequest, "vehicle")
    with get_db() as db:
        vehicle = VehicleService(db).add_vehicle(
            license_plate=req.license_plate,
            brand=req.brand,
            model=req.model,
            category=req.category,
            year=req.year,
            mileage=req.mileage,
            location=req.location,
            daily_price=req.daily_price,
            actor=get_actor(),
            origin=get_origin(),
        )
        return jsonify(_vehicle_json(vehicle)), 201


@vehicles_bp.route("/<int:vehicle_id>", methods=["PUT"])
def update_vehicle(vehicle_id: int):
    req = parse_body(UpdateVehicleRequest, "vehicle update")
    with get_db() as db:
        vehicle = VehicleService(db).update_vehicle(
            vehicle_id,
            brand=req.brand,
            model=req.model,
            category=req.category,
            year=req.year,
            location=req.location,
            daily_price=req.daily_price,
            actor=get_actor(),
            origin=get_origin(),
        )
        return jsonify(_vehicle_json(vehicle))


@vehicles_bp.route("/<int:vehicle_id>/out-of-service", methods=["PUT"])
def set_out_of_service(vehicle_id: int):
    with get_db() as db:
        vehicle = VehicleService(db).set_out_of_service(vehicle_id, actor=get_actor(), origin=get_origin())
        return jsonify(_vehicle_json(vehicle))


@vehicles_bp.route("/<int:vehicle_id>/audit", methods=["GET"])
def vehicle_audit(vehicle_id: int):
    """Audit trail of a vehicle, newest first"""
    with get_db() as db:
        VehicleService(db).get_vehicle(vehicle_id)
        logs = AuditService(db).list_for_entity("Vehicle", vehicle_id)
        return jsonify([AuditLogResponse.model_validate(log).model_dump(mode="json") for log in logs])
