class RentACarError(Exception):
    """Base exception for booking and fleet errors"""
    def __init__(self, code: str, message: str, status_code: int = 400, field: str = None, details: dict = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.field = field
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RentACarError):
    """Malformed or out-of-range input; the caller has to correct it."""
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__("VALIDATION_ERROR", message, 400, field, details)


class InvalidRangeError(ValidationError):
    """A date range or rental duration that cannot be priced."""
    def __init__(self, message: str, field: str = None, details: dict = None):
        super().__init__(message, field, details)
        self.code = "INVALID_RANGE"


class NotFoundError(RentACarError):
    def __init__(self, resource: str, resource_id=None):
        message = f"{resource} not found"
        if resource_id is not None:
            message += f": {resource_id}"
        super().__init__(
            "NOT_FOUND",
            message,
            404,
            details={"resource": resource, "resource_id": str(resource_id) if resource_id is not None else None}
        )


class ConflictError(RentACarError):
    """The request collides with current state (vehicle booked, plate taken)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__("CONFLICT", message, 409, details=details)


class IllegalStateError(ConflictError):
    """A status precondition does not hold for the requested transition."""
    def __init__(self, current_status: str, requested: str, reason: str = None):
        message = f"Cannot {requested} while status is {current_status}"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={"current_status": current_status, "requested": requested})
        self.code = "ILLEGAL_STATE"


# Resource-specific shortcuts
class BookingNotFoundError(NotFoundError):
    """Booking not found"""
    def __init__(self, booking_id=None):
        super().__init__("Booking", booking_id)


class VehicleNotFoundError(NotFoundError):
    """Vehicle not found"""
    def __init__(self, vehicle_id=None):
        super().__init__("Vehicle", vehicle_id)


class CustomerNotFoundError(NotFoundError):
    """Customer not found"""
    def __init__(self, customer_id=None):
        super().__init__("Customer", customer_id)


class VehicleUnavailableError(ConflictError):
    def __init__(self, vehicle_id, start_date=None, end_date=None):
        message = f"Vehicle {vehicle_id} is not available"
        if start_date and end_date:
            message += f" from {start_date.isoformat()} to {end_date.isoformat()}"
        super().__init__(
            message,
            details={
                "vehicle_id": vehicle_id,
                "start_date": start_date.isoformat() if start_date else None,
                "end_date": end_date.isoformat() if end_date else None,
            }
        )
        self.code = "VEHICLE_UNAVAILABLE"
