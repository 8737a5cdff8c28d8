"""
Error taxonomy for the clinic inventory tracker.

Services raise these; the API layer turns them into user-visible failures.
"""


class ClinicInventoryError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ClinicInventoryError):
    """Raised when a referenced item or order id does not exist."""

    status_code = 404


class InsufficientStockError(ClinicInventoryError):
    """Raised when a usage quantity exceeds the item's current stock."""

    status_code = 400

    def __init__(self, item_id: str, requested: int, available: int) -> None:
        super().__init__("Insufficient stock")
        self.item_id = item_id
        self.requested = requested
        self.available = available


class ValidationError(ClinicInventoryError):
    """Raised when required fields are missing or invalid."""

    status_code = 400


class DependencyFailure(ClinicInventoryError):
    """Raised when the text-generation service is unreachable or errors."""

    status_code = 502


class PersistenceFailure(ClinicInventoryError):
    """Raised when a JSON table cannot be read or written."""

    status_code = 500
