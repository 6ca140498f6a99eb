"""Handles the report-producing validation pipeline for pysepaqr.

This module orchestrates a full check of a payment payload, which includes:
1.  Discovering all available `BaseValidator` implementations.
2.  Running every enabled validator in the order of the format.
3.  Aggregating the results together with the serialized text and its
    byte length.

Unlike `PaymentPayload.valid`, the pipeline never raises for an invalid
payload: every violation ends up in the report.
"""

import os
import pkgutil
import inspect
import logging
from typing import List, Dict, Any, Type, Optional

from .config import Config
from .base_validator import BaseValidator
from .payload import PaymentPayload
from .. import validators as validators_package

# Initialize a logger for this module.
logger = logging.getLogger(__name__)


def discover_validators() -> List[Type[BaseValidator]]:
    """Discovers all validator classes within the `pysepaqr.validators` module.

    This function iterates through the modules in the `validators` package,
    inspects their members, and collects all classes that are subclasses of
    `BaseValidator` (excluding `BaseValidator` itself).

    Returns:
        List[Type[BaseValidator]]: The discovered validator classes, sorted
        by their `order` attribute.
    """
    validators = set()
    path = os.path.dirname(validators_package.__file__)

    for _, name, _ in pkgutil.iter_modules([path]):
        try:
            module = __import__(f"pysepaqr.validators.{name}", fromlist=["*"])
            for _, item in inspect.getmembers(module, inspect.isclass):
                if issubclass(item, BaseValidator) and item is not BaseValidator:
                    validators.add(item)
        except ImportError as e:
            logger.warning(f"Could not import validator module {name}: {e}")
    return sorted(validators, key=lambda v: (v.order, v.name))


def validate_payload(payload: PaymentPayload, config: Optional[Config] = None) -> Dict[str, Any]:
    """Runs all enabled validators against a payload.

    The validators run one after another because the amount check
    normalizes the amount before the byte length is measured.

    Args:
        payload (PaymentPayload): The payload to check.
        config (Optional[Config]): The application's configuration object.
            If None, the default configuration is used and every validator
            runs.

    Returns:
        Dict[str, Any]: A dictionary containing the overall verdict, the
        aggregated errors, the detailed validator outputs, and the payload
        text with its byte length.
    """
    config = config or Config(load_files=False)
    enabled_validators = [
        v(payload, config)
        for v in discover_validators()
        if config.is_validator_enabled(v.name)
    ]
    logger.info(f"Running {len(enabled_validators)} validators on payload for '{payload.beneficiary_name}'")

    validator_results = [v.validate() for v in enabled_validators]
    aggregated_errors = [err for res in validator_results for err in res.get("errors", [])]
    is_valid = not aggregated_errors

    return {
        "valid": is_valid,
        "errors": aggregated_errors,
        "validator_results": validator_results,
        "text": payload.serialize() if is_valid else "",
        "byte_length": payload.payload_byte_length(),
    }
