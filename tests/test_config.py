import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pysepaqr.core.config import Config

try:
    import tomllib
except ImportError:
    import tomli as tomllib


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.user_config = Path(self.tmp_dir.name) / "sepaqr" / "config.toml"
        self.user_patch = patch("pysepaqr.core.config.USER_CONFIG_PATH", self.user_config)
        self.user_patch.start()
        self.env_patch = patch.dict(os.environ, {}, clear=False)
        self.env_patch.start()
        for key in list(os.environ):
            if key.startswith("SEPAQR_"):
                del os.environ[key]

    def tearDown(self):
        self.env_patch.stop()
        self.user_patch.stop()
        self.tmp_dir.cleanup()

    def _write(self, name: str, content: str) -> Path:
        path = Path(self.tmp_dir.name) / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_defaults(self):
        config = Config(load_files=False)
        self.assertEqual(config.get("payment.version"), "001")
        self.assertEqual(config.get("payment.charset"), 1)
        self.assertEqual(config.get("missing.key", "fallback"), "fallback")

    def test_defaults_are_not_shared(self):
        config = Config(load_files=False)
        config.set("payment.version", "002")
        self.assertEqual(Config(load_files=False).get("payment.version"), "001")

    def test_file_overrides_defaults(self):
        path = self._write("custom.toml", '[payment]\nbeneficiary_name = "Franz Mustermänn"\nversion = "002"\n')
        config = Config(config_path=path)
        self.assertEqual(config.get("payment.beneficiary_name"), "Franz Mustermänn")
        self.assertEqual(config.get("payment.version"), "002")
        self.assertEqual(config.get("payment.charset"), 1)

    def test_environment_overrides_file(self):
        path = self._write("custom.toml", '[payment]\nbeneficiary_name = "From File"\n')
        os.environ["SEPAQR_BENEFICIARY_NAME"] = "From Env"
        os.environ["SEPAQR_CHARSET"] = "3"
        os.environ["SEPAQR_DISABLE_VALIDATORS"] = "Amount, Purpose"
        os.environ["SEPAQR_COLORS"] = "no"

        config = Config(config_path=path)
        self.assertEqual(config.get("payment.beneficiary_name"), "From Env")
        self.assertEqual(config.get("payment.charset"), 3)
        self.assertEqual(config.get("disable_validators"), ["Amount", "Purpose"])
        self.assertFalse(config.get("colors"))

    def test_invalid_file_is_skipped(self):
        path = self._write("broken.toml", "payment = [\n")
        with patch("sys.stderr"):
            config = Config(config_path=path)
        self.assertEqual(config.get("payment.version"), "001")

    def test_validator_selection(self):
        config = Config(load_files=False)
        self.assertTrue(config.is_validator_enabled("Amount"))
        config.set("disable_validators", ["Amount"])
        self.assertFalse(config.is_validator_enabled("Amount"))
        config.set("enable_validators", ["Purpose"])
        self.assertTrue(config.is_validator_enabled("Purpose"))
        self.assertFalse(config.is_validator_enabled("Version"))

    def test_payment_defaults_is_a_copy(self):
        config = Config(load_files=False)
        defaults = config.payment_defaults()
        defaults["purpose"] = "GDDS"
        self.assertEqual(config.get("payment.purpose"), "")

    def _saved(self):
        with open(self.user_config, "rb") as f:
            return tomllib.load(f)

    def test_save_and_reset_user_config(self):
        config = Config(load_files=False)
        config.set_user_value("payment.beneficiary_bic", "BHBLDEHHXXX")

        saved = self._saved()
        self.assertEqual(saved, {"payment": {"beneficiary_bic": "BHBLDEHHXXX"}})
        self.assertEqual(config.get("payment.beneficiary_bic"), "BHBLDEHHXXX")

        self.assertTrue(config.reset_user_config())
        self.assertFalse(self.user_config.exists())
        self.assertFalse(config.reset_user_config())

    def test_user_value_keeps_environment_values_out_of_the_file(self):
        os.environ["SEPAQR_BENEFICIARY_NAME"] = "Transient Env Name"
        config = Config()
        self.assertEqual(config.get("payment.beneficiary_name"), "Transient Env Name")

        config.set_user_value("payment.purpose", "GDDS")
        self.assertEqual(self._saved(), {"payment": {"purpose": "GDDS"}})

    def test_user_value_extends_existing_file(self):
        config = Config(load_files=False)
        config.set_user_value("payment.beneficiary_name", "Jane Doe")
        config.set_user_value("payment.purpose", "GDDS")
        self.assertEqual(self._saved(), {"payment": {"beneficiary_name": "Jane Doe", "purpose": "GDDS"}})

    def test_user_value_casting(self):
        config = Config(load_files=False)
        self.assertEqual(config.set_user_value("payment.beneficiary_account_number", "0012345678"), "0012345678")
        self.assertEqual(config.set_user_value("payment.purpose", "1234"), "1234")
        self.assertEqual(config.set_user_value("payment.version", "002"), "002")
        self.assertEqual(config.set_user_value("payment.charset", "2"), 2)
        self.assertIs(config.set_user_value("verbose", "true"), True)
        self.assertEqual(self._saved()["payment"]["beneficiary_account_number"], "0012345678")

    def test_user_value_rejects_non_integer_charset(self):
        config = Config(load_files=False)
        with self.assertRaises(ValueError):
            config.set_user_value("payment.charset", "utf-8")
        self.assertFalse(self.user_config.exists())


if __name__ == '__main__':
    unittest.main()
