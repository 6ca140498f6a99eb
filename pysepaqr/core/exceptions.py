"""Exceptions raised by the payload field checks."""

from typing import Optional


class PayloadValidationError(ValueError):
    """Raised when a field violates a constraint of the payload format.

    Attributes:
        field (Optional[str]): The payload attribute the error refers to.
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field
