"""Domain-specific exceptions for the indexed expense store."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class RecordNotFoundError(LookupError):
    """Raised when an expense record cannot be located."""


class PositionOutOfRangeError(RecordNotFoundError, IndexError):
    """Raised when a log position falls outside the record log."""

    def __init__(self, position: int, size: int) -> None:
        super().__init__(f"Position {position} is out of range for a log of {size} expenses")
        self.position = position
        self.size = size


class StaleHandleError(RecordNotFoundError):
    """Raised when a handle refers to an arena slot that has been reclaimed."""
