"""Domain errors raised by the scheduling services and mapped to HTTP responses in main.py"""

from typing import Optional


class SchedulingError(Exception):
    """Base class for scheduling errors."""


class ValidationError(SchedulingError):
    """Rejected input. Always raised before anything is written."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(SchedulingError):
    """Referenced entity does not exist."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity_id = entity_id


class PersistenceError(SchedulingError):
    """A write could not be committed and was rolled back."""
