"""Checks the size of the serialized payload.

A QR code of version 13 at error correction level M leaves 331 bytes for the
payload. The encoders in use add a few bytes of their own, so the budget is
328 bytes, measured after character-to-byte expansion of the whole text.
"""
from ..core.base_validator import BaseValidator
from ..utils.encoding import MAX_PAYLOAD_BYTES, approximate_utf8_length


class PayloadByteLengthValidator(BaseValidator):
    """The serialized payload must fit into 328 bytes."""

    name = "PayloadByteLength"
    field = "payload"
    description = "Serialized payload must not exceed 328 bytes."
    order = 120
    raises = False

    def _check(self) -> bool:
        byte_length = approximate_utf8_length(self.payload.serialize())
        self.add_info("Byte Length", byte_length)
        return byte_length <= MAX_PAYLOAD_BYTES
