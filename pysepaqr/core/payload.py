"""The EPC/SEPA credit-transfer QR payload.

This module provides `PaymentPayload`, the value object holding the fields of
a credit transfer. It validates the fields against the EPC quick response
code guideline and serializes them into the newline-delimited text block
that is handed to a QR encoder:

    BCD
    001
    1
    SCT
    <BIC>
    <beneficiary name>
    <account number>
    EUR<amount>
    <purpose>
    <creditor reference>
    <remittance information>
    <information>

Trailing empty lines are trimmed from the text.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional

from .charset import Charset
from .exceptions import PayloadValidationError
from ..utils.encoding import approximate_utf8_length, format_amount, format_field
from ..validators import (
    AmountValidator,
    BeneficiaryAccountNumberValidator,
    BeneficiaryBICValidator,
    BeneficiaryNameValidator,
    CharsetValidator,
    CreditorReferenceOrRemittanceValidator,
    IdentificationCodeValidator,
    InformationValidator,
    PayloadByteLengthValidator,
    PurposeValidator,
    ServiceTagValidator,
    VersionValidator,
)

__all__ = ["Charset", "PaymentPayload", "PayloadValidationError"]

logger = logging.getLogger(__name__)

# Serialization order of the payload lines.
FIELD_ORDER = (
    "service_tag",
    "version",
    "charset",
    "identification_code",
    "beneficiary_bic",
    "beneficiary_name",
    "beneficiary_account_number",
    "amount_euro",
    "purpose",
    "creditor_reference",
    "remittance_information",
    "information",
)

# Option keys of the format and of older clients, mapped to attribute names.
FIELD_ALIASES = {
    "serviceTag": "service_tag",
    "identificationCode": "identification_code",
    "beneficiaryBIC": "beneficiary_bic",
    "benefBIC": "beneficiary_bic",
    "bic": "beneficiary_bic",
    "beneficiaryName": "beneficiary_name",
    "benefName": "beneficiary_name",
    "beneficiaryAccountNumber": "beneficiary_account_number",
    "benefAccNr": "beneficiary_account_number",
    "amountEuro": "amount_euro",
    "creditorReference": "creditor_reference",
    "creditorRef": "creditor_reference",
    "remittanceInformation": "remittance_information",
    "remittanceInf": "remittance_information",
}


class PaymentPayload:
    """The fields of one SEPA credit transfer.

    Options are merged over `DEFAULTS` key by key: keyword arguments override
    the `options` mapping, and both override the defaults. Keys that are not
    fields of the payload are kept in `extra` and otherwise ignored.
    Construction never validates.

    Validation is recomputed from the current attribute values on every
    call. Note that checking the amount rounds a numeric `amount_euro` to two
    decimals and stores the result back on the instance (see
    `normalize_amount`).

    Example:
        >>> payload = PaymentPayload(beneficiary_name="Franz Mustermann",
        ...                          beneficiary_account_number="DE71110220330123456789",
        ...                          amount_euro=12.3)
        >>> payload.to_text().splitlines()[7]
        'EUR12.3'

    Attributes:
        DEFAULTS (Dict[str, Any]): The default value of every field.
    """

    DEFAULTS: Dict[str, Any] = {
        "service_tag": "BCD",
        "version": "001",
        "charset": Charset.UTF_8,
        "identification_code": "SCT",
        "beneficiary_bic": "",
        "beneficiary_name": "",
        "beneficiary_account_number": "",
        "amount_euro": "",
        "purpose": "",
        "creditor_reference": "",
        "remittance_information": "",
        "information": "",
    }

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        """Initializes the payload from caller-supplied options.

        Args:
            options (Optional[Mapping[str, Any]]): Field values keyed by
                attribute name or by one of the aliases in `FIELD_ALIASES`.
            **kwargs: Field values that take precedence over `options`.
        """
        merged = dict(self.DEFAULTS)
        self.extra: Dict[str, Any] = {}
        for source in (options or {}, kwargs):
            for key, value in source.items():
                key = FIELD_ALIASES.get(key, key)
                if key in self.DEFAULTS:
                    merged[key] = value
                else:
                    self.extra[key] = value

        self.service_tag = merged["service_tag"]
        self.version = merged["version"]
        self.charset = merged["charset"]
        self.identification_code = merged["identification_code"]
        self.beneficiary_bic = merged["beneficiary_bic"]
        self.beneficiary_name = merged["beneficiary_name"]
        self.beneficiary_account_number = merged["beneficiary_account_number"]
        self.amount_euro = merged["amount_euro"]
        self.purpose = merged["purpose"]
        self.creditor_reference = merged["creditor_reference"]
        self.remittance_information = merged["remittance_information"]
        self.information = merged["information"]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PaymentPayload":
        """Builds a payload from a parsed TOML or JSON document.

        A top-level `payment` table is used when present, so a payment can
        live next to other settings in the same file.
        """
        payment = data.get("payment", data)
        if not isinstance(payment, Mapping):
            raise TypeError("Payment data must be a mapping of field names to values.")
        return cls(payment)

    def as_dict(self) -> Dict[str, Any]:
        """Returns the current field values followed by any extra keys."""
        values = {field: getattr(self, field) for field in FIELD_ORDER}
        values.update(self.extra)
        return values

    def normalize_amount(self) -> Any:
        """Rounds a numeric amount to two decimals and stores it back.

        Halves are rounded up on the decimal representation of the value, so
        12.345 becomes 12.35. Strings and other non-numeric values are left
        untouched.

        Returns:
            Any: The (possibly normalized) amount.
        """
        amount = self.amount_euro
        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            return amount
        exact = Decimal(str(amount))
        if not exact.is_finite():
            return amount
        rounded = exact.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        self.amount_euro = float(rounded)
        return self.amount_euro

    # Structural checks: these return False and never raise.

    def valid_service_tag(self) -> bool:
        return ServiceTagValidator(self).check()

    def valid_version(self) -> bool:
        return VersionValidator(self).check()

    def valid_charset(self) -> bool:
        return CharsetValidator(self).check()

    def valid_identification_code(self) -> bool:
        return IdentificationCodeValidator(self).check()

    # Field constraints: these raise PayloadValidationError on violation.

    def valid_beneficiary_name(self) -> bool:
        return BeneficiaryNameValidator(self).check()

    def valid_beneficiary_account_number(self) -> bool:
        return BeneficiaryAccountNumberValidator(self).check()

    def valid_amount_euro(self) -> bool:
        """Checks the amount; an empty string is valid, other strings are not.

        A numeric amount is normalized in place before the range check.

        Raises:
            PayloadValidationError: If a numeric amount is out of range.
        """
        return AmountValidator(self).check()

    def valid_beneficiary_bic(self) -> bool:
        return BeneficiaryBICValidator(self).check()

    def valid_purpose(self) -> bool:
        return PurposeValidator(self).check()

    def valid_information(self) -> bool:
        return InformationValidator(self).check()

    def valid_creditor_reference_or_remittance(self) -> bool:
        return CreditorReferenceOrRemittanceValidator(self).check()

    def valid_payload_byte_length(self) -> bool:
        return PayloadByteLengthValidator(self).check()

    def valid(self) -> bool:
        """Runs every check in the order of the format.

        Checks on the boolean channel short-circuit to False; a violated
        field constraint propagates its `PayloadValidationError`.

        Returns:
            bool: True if the payload can be serialized.
        """
        return (
            self.valid_service_tag()
            and self.valid_version()
            and self.valid_charset()
            and self.valid_identification_code()
            and self.valid_beneficiary_name()
            and self.valid_beneficiary_account_number()
            and self.valid_amount_euro()
            and self.valid_beneficiary_bic()
            and self.valid_purpose()
            and self.valid_information()
            and self.valid_creditor_reference_or_remittance()
            and self.valid_payload_byte_length()
        )

    def serialize(self) -> str:
        """Joins the fields in the fixed order of the format.

        No validation takes place. The amount is prefixed with "EUR" and
        trailing whitespace, including empty trailing lines, is removed.

        Returns:
            str: The payload text.
        """
        lines = []
        for field in FIELD_ORDER:
            value = getattr(self, field)
            if field == "amount_euro":
                lines.append("EUR" + format_amount(value))
            else:
                lines.append(format_field(value))
        return "\n".join(lines).rstrip()

    def payload_byte_length(self) -> int:
        """Returns the size of the serialized text as counted for the budget."""
        return approximate_utf8_length(self.serialize())

    def to_text(self) -> str:
        """Returns the payload text, or an empty string if it is invalid.

        Field constraint errors are swallowed here; call `valid` to learn
        why a payload was rejected.
        """
        try:
            if not self.valid():
                return ""
        except PayloadValidationError as e:
            logger.debug(f"Payload rejected: {e}")
            return ""
        return self.serialize()

    def to_bytes(self) -> bytes:
        """Encodes `to_text` with the codec of the declared charset.

        Returns:
            bytes: The encoded payload, or empty bytes if it is invalid.

        Raises:
            UnicodeEncodeError: If the text cannot be represented in the
                declared charset.
        """
        text = self.to_text()
        if not text:
            return b""
        return text.encode(Charset(self.charset).codec)

    def __repr__(self) -> str:
        return f"PaymentPayload({self.as_dict()})"
