"""
Base validator class that all payload field checks inherit from.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional, TYPE_CHECKING

from .exceptions import PayloadValidationError

if TYPE_CHECKING:
    from .config import Config
    from .payload import PaymentPayload

logger = logging.getLogger(__name__)


class BaseValidator(ABC):
    """Abstract base class for all payload field validators.

    The payload format signals violations through two channels. Structural
    checks (service tag, version, ...) answer with a plain boolean, while
    field constraints fail fast by raising `PayloadValidationError`. Each
    subclass declares its channel through the `raises` attribute and
    implements `_check` accordingly.

    Attributes:
        name (str): The display name of the validator.
        field (str): The payload attribute the validator inspects.
        description (str): A brief explanation of what the validator checks.
        order (int): Position of the check in the validation sequence.
        raises (bool): True if violations raise instead of returning False.
    """

    name: str = "UnnamedValidator"
    field: str = ""
    description: str = "No description provided"
    order: int = 100
    raises: bool = True

    def __init__(self, payload: "PaymentPayload", config: Optional["Config"] = None) -> None:
        """Initializes the validator with the payload to inspect.

        Args:
            payload (PaymentPayload): The payload whose field is checked.
            config (Optional[Config]): The application's configuration object.
                Defaults to None.
        """
        self.payload = payload
        self.config = config
        self.errors: List[str] = []
        self.info: Dict[str, Any] = {}

    def check(self) -> bool:
        """Runs the check through its natural channel.

        Returns:
            bool: The outcome of a boolean-channel check, or True for a
            fail-fast check that did not raise.

        Raises:
            PayloadValidationError: If a fail-fast check is violated.
        """
        return bool(self._check())

    def validate(self) -> Dict[str, Any]:
        """Runs the check and returns the results as a report.

        Unlike `check`, this never raises for a violated constraint: both
        channels are folded into the `errors` list of the result.

        Returns:
            Dict[str, Any]: A dictionary containing the validation results.
        """
        try:
            passed = bool(self._check())
        except PayloadValidationError as e:
            passed = False
            self.add_error(str(e))
        else:
            if not passed:
                self.add_error(f"{self.description} Check failed for '{self.field}'.")
        if not passed:
            logger.debug(f"Validator {self.name} rejected field '{self.field}'.")
        return self.result(passed)

    @abstractmethod
    def _check(self) -> bool:
        """Abstract method for implementing the field rule.

        Subclasses on the fail-fast channel call `fail` on a violation;
        boolean-channel subclasses simply return False.
        """
        raise NotImplementedError("Subclasses must implement _check()")

    def result(self, passed: bool) -> Dict[str, Any]:
        """Returns the validation results in a standardized dictionary format.

        Args:
            passed (bool): Whether the field satisfied its rule.

        Returns:
            Dict[str, Any]: A dictionary containing the validator's name,
            field, description, channel, outcome, and any findings.
        """
        return {
            "name": self.name,
            "field": self.field,
            "description": self.description,
            "channel": "raise" if self.raises else "boolean",
            "passed": passed,
            "errors": self.errors,
            "info": self.info,
        }

    def fail(self, message: str) -> None:
        """Signals a violated constraint on the fail-fast channel.

        Args:
            message (str): A human-readable message naming the field.

        Raises:
            PayloadValidationError: Always.
        """
        raise PayloadValidationError(message, field=self.field)

    def add_error(self, message: str) -> None:
        """Adds an error message to the validation results.

        Args:
            message (str): The error message to add.
        """
        self.errors.append(message)

    def add_info(self, key: str, value: Any) -> None:
        """Adds informational data to the validation results.

        Args:
            key (str): The key for the informational data.
            value (Any): The value of the informational data.
        """
        self.info[key] = value

    def get_field(self, field: Optional[str] = None, default: Any = None) -> Any:
        """Safely retrieves an attribute of the payload.

        Args:
            field (Optional[str]): The attribute to read. Defaults to the
                validator's own `field`.
            default (Any): The value to return if the attribute is missing.

        Returns:
            Any: The attribute value or the default value.
        """
        return getattr(self.payload, field or self.field, default)

    @staticmethod
    def is_text_within(value: Any, minimum: int, maximum: int) -> bool:
        """Returns True if `value` is a string whose length is in range."""
        return isinstance(value, str) and minimum <= len(value) <= maximum
