from rentacar.models.customer import Customer
from rentacar.models.vehicle import Vehicle, VehicleCategory, VehicleStatus
from rentacar.models.booking import Booking, BookingStatus
from rentacar.models.audit_log import AuditLog

__all__ = [
    "Customer",
    "Vehicle",
    "VehicleCategory",
    "VehicleStatus",
    "Booking",
    "BookingStatus",
    "AuditLog",
]
