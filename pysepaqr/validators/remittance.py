"""Checks for the purpose, remittance and information fields.

The creditor reference (structured, ISO 11649) and the unstructured
remittance information are alternatives: at most one of them may be filled
in. All checks in this module raise `PayloadValidationError` on violation.
"""
from ..core.base_validator import BaseValidator

PURPOSE_MAX_LENGTH = 4
INFORMATION_MAX_LENGTH = 70
CREDITOR_REFERENCE_MAX_LENGTH = 35
REMITTANCE_INFORMATION_MAX_LENGTH = 140


class PurposeValidator(BaseValidator):
    """The purpose code is optional and limited to 4 characters."""

    name = "Purpose"
    field = "purpose"
    description = "Purpose may have at most 4 characters."
    order = 90

    def _check(self) -> bool:
        if not self.is_text_within(self.get_field(), 0, PURPOSE_MAX_LENGTH):
            self.fail("Purpose not valid!")
        return True


class InformationValidator(BaseValidator):
    """The beneficiary-to-originator information is limited to 70 characters."""

    name = "Information"
    field = "information"
    description = "Information may have at most 70 characters."
    order = 100

    def _check(self) -> bool:
        if not self.is_text_within(self.get_field(), 0, INFORMATION_MAX_LENGTH):
            self.fail("Information not valid!")
        return True


class CreditorReferenceOrRemittanceValidator(BaseValidator):
    """Enforces that creditor reference and remittance exclude each other.

    Leaving both empty is accepted; the payload then simply carries no
    reference at all.
    """

    name = "CreditorReferenceOrRemittance"
    field = "creditor_reference"
    description = "Either a creditor reference (35) or remittance information (140) may be given."
    order = 110

    def _check(self) -> bool:
        reference = self.get_field("creditor_reference")
        remittance = self.get_field("remittance_information")

        remittance_branch = reference == "" and self.is_text_within(remittance, 0, REMITTANCE_INFORMATION_MAX_LENGTH)
        reference_branch = remittance == "" and self.is_text_within(reference, 0, CREDITOR_REFERENCE_MAX_LENGTH)
        if not (remittance_branch or reference_branch):
            self.fail("Creditor reference or remittance information not valid!")
        return True
