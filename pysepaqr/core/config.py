"""Manages configuration for pysepaqr.

This module is responsible for loading, managing, and saving the application's
configuration settings. It aggregates settings from default values, TOML files,
and environment variables, providing a unified interface for accessing them.
The `payment` table holds default field values, so that a recurring
beneficiary does not have to be typed in for every payload.
"""

import copy
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "sepaqr" / "config.toml"

# The project-specific configuration file, looked up in the working directory.
PROJECT_CONFIG_NAME = "sepaqr.toml"


class Config:
    """Handles the configuration for the pysepaqr application.

    This class loads configuration from multiple sources with a defined
    precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `sepaqr.toml` file.
    3.  User-level `~/.config/sepaqr/config.toml` file.
    4.  Environment variables (highest precedence).

    A custom configuration file given at runtime replaces the two default
    file locations.

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): A dictionary containing the default
            configuration values.
    """

    DEFAULT_CONFIG = {
        "verbose": False,
        "colors": True,
        "disable_validators": [],
        "enable_validators": [],  # If specified, only these validators run.
        "payment": {
            "version": "001",
            "charset": 1,  # UTF-8
            "beneficiary_name": "",
            "beneficiary_bic": "",
            "beneficiary_account_number": "",
            "purpose": "",
            "information": "",
        },
    }

    def __init__(self, config_path: Optional[Path] = None, load_files: bool = True) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): An optional path to a specific
                configuration file to load. If provided, it takes precedence
                over default file locations.
            load_files (bool): If False, neither files nor environment
                variables are read and only the defaults apply.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        if load_files:
            self._load_config(config_path)

    def _load_config(self, config_path: Optional[Path] = None) -> None:
        """Loads configuration from files and environment variables.

        Args:
            config_path (Optional[Path]): A specific config file path.
        """
        if config_path:
            self._load_file_config(Path(config_path))
        else:
            self._load_default_configs()

        self._load_env_config()

    def _load_default_configs(self) -> None:
        """Loads configs from standard locations if they exist."""
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config.exists():
            self._load_file_config(project_config)

        if USER_CONFIG_PATH.exists():
            self._load_file_config(USER_CONFIG_PATH)

    def _merge_configs(self, base: Dict[str, Any], new: Dict[str, Any]) -> None:
        """Recursively merges a new config dict into a base dict.

        Args:
            base (Dict[str, Any]): The base configuration dictionary.
            new (Dict[str, Any]): The new configuration to merge in.
        """
        for key, value in new.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _load_file_config(self, config_path: Path) -> None:
        """Loads and merges configuration from a TOML file.

        Args:
            config_path (Path): The path to the TOML configuration file.
        """
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
                self._merge_configs(self.config, file_config)
        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)

    def _load_env_config(self) -> None:
        """Loads and merges configuration from environment variables."""
        env_mapping = {
            "SEPAQR_VERBOSE": "verbose",
            "SEPAQR_COLORS": "colors",
            "SEPAQR_DISABLE_VALIDATORS": "disable_validators",
            "SEPAQR_ENABLE_VALIDATORS": "enable_validators",
            "SEPAQR_VERSION": "payment.version",
            "SEPAQR_CHARSET": "payment.charset",
            "SEPAQR_BENEFICIARY_NAME": "payment.beneficiary_name",
            "SEPAQR_BENEFICIARY_BIC": "payment.beneficiary_bic",
            "SEPAQR_BENEFICIARY_ACCOUNT_NUMBER": "payment.beneficiary_account_number",
        }

        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_key(config_key, value)

    @staticmethod
    def _cast_value(leaf_key: str, value: str) -> Any:
        """Casts a string setting to the type its key expects.

        Only the flags, the charset code and the validator lists are cast;
        every other value, including digit-only payment fields such as an
        account number, stays a string.

        Args:
            leaf_key (str): The last component of the dot-separated key.
            value (str): The string value to cast.

        Returns:
            Any: The cast value.

        Raises:
            ValueError: If the charset is not an integer.
        """
        if leaf_key in ["colors", "verbose"]:
            return value.lower() in ("true", "1", "yes", "on")
        if leaf_key in ["charset"]:
            return int(value)
        if leaf_key in ["disable_validators", "enable_validators"]:
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @staticmethod
    def _set_in(target_config: Dict[str, Any], key_path: str, value: Any) -> None:
        """Sets `value` in a nested dict using a dot-separated path."""
        keys = key_path.split('.')
        for key in keys[:-1]:
            if key not in target_config or not isinstance(target_config[key], dict):
                target_config[key] = {}
            target_config = target_config[key]
        target_config[keys[-1]] = value

    def _set_nested_key(self, key_path: str, value: str) -> None:
        """Sets a value in the config dict using a dot-separated path.

        This method correctly parses and casts values from environment
        variables, which are always strings.

        Args:
            key_path (str): The dot-separated key (e.g., "payment.charset").
            value (str): The string value from the environment variable.
        """
        leaf_key = key_path.split('.')[-1]
        try:
            self._set_in(self.config, key_path, self._cast_value(leaf_key, value))
        except ValueError:
            print(f"Warning: Invalid integer value for {leaf_key}: {value}", file=sys.stderr)

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value using a dot-separated key.

        Args:
            key (str): The dot-separated key (e.g., "payment.version").
            default (Any): The default value to return if the key is not found.

        Returns:
            Any: The configuration value or the default.
        """
        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a configuration value in memory.

        Args:
            key (str): The dot-separated key (e.g., "payment.version").
            value (Any): The value to set.
        """
        keys = key.split('.')
        target_config = self.config
        for k in keys[:-1]:
            target_config = target_config.setdefault(k, {})
        target_config[keys[-1]] = value

    def is_validator_enabled(self, validator_name: str) -> bool:
        """Checks if a specific validator is enabled.

        The logic is as follows:
        - If `enable_validators` is set, the validator is enabled only if
          it's in that list.
        - Otherwise, the validator is enabled unless it's in the
          `disable_validators` list.

        Args:
            validator_name (str): The name of the validator to check.

        Returns:
            bool: True if the validator is enabled, False otherwise.
        """
        enabled_list = self.get("enable_validators", [])
        if enabled_list:
            return validator_name in enabled_list

        disabled_list = self.get("disable_validators", [])
        return validator_name not in disabled_list

    def payment_defaults(self) -> Dict[str, Any]:
        """Returns the configured default payment fields.

        Returns:
            Dict[str, Any]: A copy of the `payment` table, suitable as the
            `options` argument of `PaymentPayload`.
        """
        payment = self.get("payment", {})
        return dict(payment) if isinstance(payment, dict) else {}

    def _get_user_config(self) -> Dict[str, Any]:
        """Loads and returns the contents of the user config file.

        Returns:
            Dict[str, Any]: The user configuration dictionary, or an empty
            dict if the file doesn't exist or fails to parse.
        """
        if not USER_CONFIG_PATH.exists():
            return {}
        try:
            with open(USER_CONFIG_PATH, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return {}

    def set_user_value(self, key: str, value: str) -> Any:
        """Stores a single setting in the user config file.

        Only the given key is added to what the user file already holds, so
        values that came from a project file or the environment are not
        persisted along with it.

        Args:
            key (str): The dot-separated key (e.g., "payment.purpose").
            value (str): The value as typed on the command line.

        Returns:
            Any: The value after type casting.

        Raises:
            ValueError: If the value cannot be cast to the key's type.
            IOError: If the configuration file cannot be written.
        """
        processed_value = self._cast_value(key.split('.')[-1], value)
        user_config = self._get_user_config()
        self._set_in(user_config, key, processed_value)

        try:
            USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "wb") as f:
                tomli_w.dump(user_config, f)
        except (OSError, TypeError) as e:
            raise IOError(f"Failed to save configuration to {USER_CONFIG_PATH}: {e}")

        self._set_in(self.config, key, processed_value)
        return processed_value

    def reset_user_config(self) -> bool:
        """Deletes the user config file.

        Returns:
            bool: True if a file was removed, False if there was none.
        """
        if not USER_CONFIG_PATH.exists():
            return False
        USER_CONFIG_PATH.unlink()
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        return True

    def __str__(self) -> str:
        """Returns a string representation of the configuration.

        Returns:
            str: A string showing the current configuration state.
        """
        return f"Config({self.config})"
