import unittest

from pysepaqr.core.config import Config
from pysepaqr.core.payload import PaymentPayload
from pysepaqr.core.validator import discover_validators, validate_payload
from pysepaqr.validators.amount import AmountValidator
from pysepaqr.validators.beneficiary import BeneficiaryNameValidator
from pysepaqr.validators.byte_length import PayloadByteLengthValidator
from pysepaqr.validators.header import CharsetValidator, VersionValidator


def epc_demonstrator() -> PaymentPayload:
    return PaymentPayload(
        beneficiary_name="Franz Mustermänn",
        beneficiary_bic="BHBLDEHHXXX",
        beneficiary_account_number="DE71110220330123456789",
        amount_euro=12.3,
        purpose="GDDS",
        creditor_reference="RF18539007547034",
    )


class TestFieldValidators(unittest.TestCase):

    def test_raised_error_is_reported(self):
        """Test that a fail-fast violation ends up in the report."""
        validator = BeneficiaryNameValidator(PaymentPayload())
        result = validator.validate()

        self.assertFalse(result["passed"])
        self.assertEqual(result["channel"], "raise")
        self.assertEqual(result["field"], "beneficiary_name")
        self.assertEqual(result["errors"], ["Beneficiary name not valid!"])

    def test_false_result_is_reported(self):
        """Test that a boolean-channel failure ends up in the report."""
        validator = VersionValidator(PaymentPayload(version="003"))
        result = validator.validate()

        self.assertFalse(result["passed"])
        self.assertEqual(result["channel"], "boolean")
        self.assertEqual(len(result["errors"]), 1)
        self.assertIn("'version'", result["errors"][0])

    def test_passing_check(self):
        result = CharsetValidator(PaymentPayload()).validate()
        self.assertTrue(result["passed"])
        self.assertEqual(result["errors"], [])
        self.assertEqual(result["info"]["Codec"], "utf-8")

    def test_amount_info_holds_normalized_value(self):
        payload = PaymentPayload(amount_euro=12.345)
        result = AmountValidator(payload).validate()
        self.assertTrue(result["passed"])
        self.assertEqual(result["info"]["Normalized Amount"], 12.35)
        self.assertEqual(payload.amount_euro, 12.35)

    def test_byte_length_info(self):
        result = PayloadByteLengthValidator(epc_demonstrator()).validate()
        self.assertTrue(result["passed"])
        self.assertEqual(result["info"]["Byte Length"], 96)


class TestPipeline(unittest.TestCase):

    def setUp(self):
        self.config = Config(load_files=False)

    def test_discovery_order(self):
        names = [v.name for v in discover_validators()]
        self.assertEqual(names, [
            "ServiceTag",
            "Version",
            "Charset",
            "IdentificationCode",
            "BeneficiaryName",
            "BeneficiaryAccountNumber",
            "Amount",
            "BeneficiaryBIC",
            "Purpose",
            "Information",
            "CreditorReferenceOrRemittance",
            "PayloadByteLength",
        ])

    def test_valid_payload_report(self):
        report = validate_payload(epc_demonstrator(), self.config)

        self.assertTrue(report["valid"])
        self.assertEqual(report["errors"], [])
        self.assertEqual(len(report["validator_results"]), 12)
        self.assertTrue(report["text"].startswith("BCD\n001\n1\nSCT\nBHBLDEHHXXX\n"))
        self.assertEqual(report["byte_length"], 96)

    def test_every_problem_is_reported(self):
        payload = PaymentPayload(purpose="ABCDE", creditor_reference="abc", remittance_information="abc")
        report = validate_payload(payload, self.config)

        self.assertFalse(report["valid"])
        self.assertEqual(report["text"], "")
        self.assertEqual(report["errors"], [
            "Beneficiary name not valid!",
            "Beneficiary account number not valid!",
            "Purpose not valid!",
            "Creditor reference or remittance information not valid!",
        ])

    def test_disabled_validators_are_skipped(self):
        self.config.set("disable_validators", ["BeneficiaryName", "BeneficiaryAccountNumber"])
        report = validate_payload(PaymentPayload(), self.config)

        self.assertTrue(report["valid"])
        self.assertEqual(len(report["validator_results"]), 10)
        self.assertEqual(report["text"], "BCD\n001\n1\nSCT\n\n\n\nEUR")

    def test_enabled_validators_restrict_the_run(self):
        self.config.set("enable_validators", ["Version"])
        report = validate_payload(PaymentPayload(), self.config)

        self.assertEqual([r["name"] for r in report["validator_results"]], ["Version"])
        self.assertTrue(report["valid"])

    def test_default_config(self):
        report = validate_payload(epc_demonstrator())
        self.assertTrue(report["valid"])


if __name__ == '__main__':
    unittest.main()
