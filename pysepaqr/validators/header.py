"""Checks for the four fixed header lines of the payload.

The header identifies the payload as an EPC credit transfer: the service tag,
the format version, the charset code and the identification code. These are
structural checks that answer with a boolean and never raise.
"""
from ..core.base_validator import BaseValidator
from ..core.charset import Charset

SERVICE_TAG = "BCD"
IDENTIFICATION_CODE = "SCT"
SUPPORTED_VERSIONS = ("001", "002")


class ServiceTagValidator(BaseValidator):
    """The service tag must be 'BCD'."""

    name = "ServiceTag"
    field = "service_tag"
    description = "Service tag must be 'BCD'."
    order = 10
    raises = False

    def _check(self) -> bool:
        return self.get_field() == SERVICE_TAG


class VersionValidator(BaseValidator):
    """The version must be '001' or '002'."""

    name = "Version"
    field = "version"
    description = "Version must be '001' or '002'."
    order = 20
    raises = False

    def _check(self) -> bool:
        return self.get_field() in SUPPORTED_VERSIONS


class CharsetValidator(BaseValidator):
    """The charset must be one of the eight numeric codes of the guideline."""

    name = "Charset"
    field = "charset"
    description = "Charset must be a code between 1 and 8."
    order = 30
    raises = False

    def _check(self) -> bool:
        charset = self.get_field()
        if isinstance(charset, bool) or not isinstance(charset, int):
            return False
        valid = Charset.UTF_8 <= charset <= Charset.ISO8859_15
        if valid:
            self.add_info("Codec", Charset(charset).codec)
        return valid


class IdentificationCodeValidator(BaseValidator):
    """The identification code must be 'SCT' (SEPA credit transfer)."""

    name = "IdentificationCode"
    field = "identification_code"
    description = "Identification code must be 'SCT'."
    order = 40
    raises = False

    def _check(self) -> bool:
        return self.get_field() == IDENTIFICATION_CODE
