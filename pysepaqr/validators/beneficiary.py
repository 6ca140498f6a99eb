"""Checks for the beneficiary fields of the payload.

The beneficiary is identified by its name, its account number (IBAN) and,
depending on the format version, its bank identifier code. All three are
field constraints on the fail-fast channel: a violation raises
`PayloadValidationError` naming the field.
"""
from ..core.base_validator import BaseValidator

NAME_MAX_LENGTH = 70
ACCOUNT_NUMBER_MAX_LENGTH = 34
BIC_MAX_LENGTH = 11


class BeneficiaryNameValidator(BaseValidator):
    """The beneficiary name is mandatory and limited to 70 characters."""

    name = "BeneficiaryName"
    field = "beneficiary_name"
    description = "Beneficiary name must have 1 to 70 characters."
    order = 50

    def _check(self) -> bool:
        if not self.is_text_within(self.get_field(), 1, NAME_MAX_LENGTH):
            self.fail("Beneficiary name not valid!")
        return True


class BeneficiaryAccountNumberValidator(BaseValidator):
    """The account number is mandatory and limited to 34 characters."""

    name = "BeneficiaryAccountNumber"
    field = "beneficiary_account_number"
    description = "Beneficiary account number must have 1 to 34 characters."
    order = 60

    def _check(self) -> bool:
        if not self.is_text_within(self.get_field(), 1, ACCOUNT_NUMBER_MAX_LENGTH):
            self.fail("Beneficiary account number not valid!")
        return True


class BeneficiaryBICValidator(BaseValidator):
    """Checks the bank identifier code of the beneficiary.

    Version 001 requires the BIC line to be present, version 002 allows it to
    be absent. When a BIC is given it may hold at most 11 characters; an empty
    string is accepted in both versions.
    """

    name = "BeneficiaryBIC"
    field = "beneficiary_bic"
    description = "Beneficiary BIC may have at most 11 characters."
    order = 80

    def _check(self) -> bool:
        bic = self.get_field()
        if bic is None:
            if self.get_field("version") != "002":
                self.fail("BIC is mandatory in version 001!")
            return True
        if not self.is_text_within(bic, 0, BIC_MAX_LENGTH):
            self.fail("Beneficiary BIC not valid!")
        return True
