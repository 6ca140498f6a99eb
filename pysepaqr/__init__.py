"""pysepaqr: EPC/SEPA credit-transfer QR payloads.

This package validates the fields of a SEPA credit transfer and builds the
newline-delimited text block that QR code encoders consume (the "BCD"
payload, also known as GiroCode).
"""

from .core.exceptions import PayloadValidationError
from .core.payload import Charset, PaymentPayload

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = ["Charset", "PaymentPayload", "PayloadValidationError", "__version__", "__license__"]
