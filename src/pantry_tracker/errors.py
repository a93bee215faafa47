"""Error types for Pantry Tracker."""

from uuid import UUID


class PantryError(Exception):
    """Base class for all Pantry Tracker errors."""

    error_code = "PANTRY_ERROR"


class ValidationError(PantryError, ValueError):
    """Raised when a record or argument violates a domain invariant."""

    error_code = "VALIDATION_ERROR"


class DuplicateEntryError(ValidationError):
    """Raised when an item is already waiting on the shopping list."""

    error_code = "DUPLICATE_ITEM"

    def __init__(self, name: str, quantity: float, unit: str):
        self.name = name
        super().__init__(f"'{name}' is already on the shopping list ({quantity} {unit})")


class DivisionError(PantryError, ZeroDivisionError):
    """Raised when a percent change is requested against a zero base price."""

    error_code = "UNDEFINED_CHANGE"

    def __init__(self, current: float, previous: float):
        self.current = current
        self.previous = previous
        super().__init__(
            f"Percent change from {previous} to {current} is undefined (previous price is 0)"
        )


class NotFoundError(PantryError, LookupError):
    """Raised when an operation references a record that does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, table: str, record_id: UUID | str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"Record '{record_id}' not found in {table}")


class UpstreamError(PantryError):
    """Raised when the persistence gateway fails."""

    error_code = "UPSTREAM_ERROR"
