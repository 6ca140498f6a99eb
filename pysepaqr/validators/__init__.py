"""The field validators of the EPC payload.

This package contains one class per field rule. They are dynamically
discovered by the validation pipeline and also back the `valid_*` methods of
`pysepaqr.core.payload.PaymentPayload`. Each module in this package should
contain classes that inherit from `pysepaqr.core.base_validator.BaseValidator`.
"""
from .amount import AmountValidator
from .beneficiary import BeneficiaryAccountNumberValidator, BeneficiaryBICValidator, BeneficiaryNameValidator
from .byte_length import PayloadByteLengthValidator
from .header import CharsetValidator, IdentificationCodeValidator, ServiceTagValidator, VersionValidator
from .remittance import CreditorReferenceOrRemittanceValidator, InformationValidator, PurposeValidator
