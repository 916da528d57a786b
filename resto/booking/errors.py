"""Reservation engine error taxonomy"""

from typing import Dict, List, Optional


class ReservationError(Exception):
    """Base class for errors the engine reports to its callers"""

    status_code = 500
    error_code = "RESERVATION_ERROR"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ReservationError):
    """Bad input shape or range, reported field by field"""

    status_code = 422
    error_code = "VALIDATION_ERROR"

    def __init__(self, errors: Dict[str, List[str]], detail: str = "Invalid fields"):
        super().__init__(detail)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls({field: [message]}, detail=message)

    @classmethod
    def from_pydantic(cls, errors: List[dict]) -> "ValidationError":
        """Collapse pydantic error dicts into field -> messages"""
        fields: Dict[str, List[str]] = {}
        for error in errors:
            loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            field = ".".join(loc) or "request"
            message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
            fields.setdefault(field, []).append(message)
        return cls(fields)


class NotFoundError(ReservationError):
    status_code = 404
    error_code = "NOT_FOUND"


class CapacityError(ReservationError):
    status_code = 409
    error_code = "CAPACITY_ERROR"


class NoTablesConfigured(CapacityError):
    error_code = "NO_TABLES_CONFIGURED"

    def __init__(self):
        super().__init__("No tables are configured for this date")


class NoSuitableTable(CapacityError):
    error_code = "NO_SUITABLE_TABLE"

    def __init__(self, party_size: int, max_capacity: int):
        super().__init__(
            f"No table can seat a party of {party_size}; "
            f"the largest table seats {max_capacity}"
        )
        self.party_size = party_size
        self.max_capacity = max_capacity


class SlotUnavailableError(CapacityError):
    error_code = "SLOT_UNAVAILABLE"


class ConflictError(ReservationError):
    """Confirmation code collided with an existing reservation"""

    status_code = 409
    error_code = "CONFLICT"


class ConfirmationCodeExhaustedError(ReservationError):
    error_code = "CONFIRMATION_CODE_EXHAUSTED"

    def __init__(self, attempts: int):
        super().__init__(
            f"Failed to generate a unique confirmation code after {attempts} attempts"
        )
        self.attempts = attempts


class InvalidTransitionError(ReservationError):
    status_code = 409
    error_code = "INVALID_TRANSITION"


class PaymentError(ReservationError):
    status_code = 402
    error_code = "PAYMENT_ERROR"

    def __init__(self, detail: str, amount_too_small: bool = False):
        super().__init__(detail)
        self.amount_too_small = amount_too_small


class SecurityError(ReservationError):
    """Link MAC mismatch; callers render it as a plain not-found"""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, detail: str = "Reservation not found"):
        super().__init__(detail)


class LinkSigningError(ReservationError):
    error_code = "LINK_SIGNING_FAILED"

    def __init__(self, detail: str = "Failed to generate secure reservation link"):
        super().__init__(detail)


class PersistenceError(ReservationError):
    error_code = "DATABASE_ERROR"


class NotificationError(ReservationError):
    """Never raised to callers; attached to successful results as a warning"""

    error_code = "NOTIFICATION_FAILED"

    def __init__(self, template: str, detail: Optional[str] = None):
        super().__init__(detail or "Notification could not be sent")
        self.template = template
