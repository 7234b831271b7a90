"""Provides functions for loading and accessing configuration settings.

Supports loading from environment variables, a .env file and an optional
YAML configuration file (e.g., ~/.promoted_demo/config.yaml), and resolves
them into the typed AppConfig used to build the delivery client.
"""

import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
import yaml

from promoted_demo.domain.models.common import mask_secret

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".promoted_demo"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"

DEFAULT_DELIVERY_TIMEOUT_MILLIS = 1000
DEFAULT_METRICS_TIMEOUT_MILLIS = 1000

# Literals accepted as booleans, matching strconv-style parsing.
TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

SECRET_FIELDS = ("metrics_api_key", "delivery_api_key")

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}  # For testing purposes
_loaded = False


class ConfigurationError(Exception):
    """Raised when required configuration is missing or out of range."""


@dataclass
class AppConfig:
    """Resolved settings for talking to the Promoted Delivery and Metrics APIs."""
    metrics_api_endpoint_url: str
    metrics_api_key: str
    delivery_api_endpoint_url: str
    delivery_api_key: str
    only_log: bool = False
    shadow_traffic_delivery_rate: float = 0.0
    blocking_shadow_traffic: bool = False
    delivery_timeout_millis: int = DEFAULT_DELIVERY_TIMEOUT_MILLIS
    metrics_timeout_millis: int = DEFAULT_METRICS_TIMEOUT_MILLIS
    perform_checks: bool = False

    def masked(self) -> Dict[str, Any]:
        """Returns the settings as a dict with API keys masked."""
        values = asdict(self)
        for name in SECRET_FIELDS:
            values[name] = mask_secret(values[name])
        return values


def load_configuration(config_file: Path = DEFAULT_CONFIG_FILE, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
            if isinstance(yaml_config, dict):
                _config.update({str(k).upper(): v for k, v in yaml_config.items()})
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False so real environment variables win
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug(".env file not found at or above current directory.")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load re-reads its sources."""
    global _config, _loaded
    _config = {}
    _loaded = False


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def get_config(key: str, default: Any = None) -> Any:
    """Get a raw configuration value by key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (key upper-cased)
    3. YAML config
    4. Default value

    Values are returned as found; typed access goes through the parse_* helpers.
    """
    env_key = key.upper()
    if env_key in _test_config:
        return _test_config[env_key]
    if env_key in os.environ:
        return os.environ[env_key]
    if env_key in _config:
        return _config[env_key]
    return default


def get_string_config(key: str) -> str:
    value = get_config(key)
    return "" if value is None else str(value)


def parse_bool_env(key: str, default: bool) -> bool:
    """Reads a boolean setting, falling back to default when missing or malformed."""
    value = get_config(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value)
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    logger.debug(f"Ignoring unparseable boolean for {key}: '{text}'. Using default {default}.")
    return default


def _numeric_text(value: Any) -> Optional[str]:
    """Returns the value as text if it may be parsed as a number.

    Python's float() and int() accept digit separators and padding that
    strconv-style parsing rejects; those values count as malformed.
    """
    text = str(value)
    if not text or text != text.strip() or "_" in text:
        return None
    return text


def parse_float_env(key: str, default: float) -> float:
    """Reads a float setting, falling back to default when missing or malformed."""
    value = get_config(key)
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    text = _numeric_text(value)
    if text is not None:
        try:
            return float(text)
        except ValueError:
            pass
    logger.debug(f"Ignoring unparseable float for {key}: '{value}'. Using default {default}.")
    return default


def parse_int_env(key: str, default: int) -> int:
    """Reads an integer setting, falling back to default when missing or malformed."""
    value = get_config(key)
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    text = _numeric_text(value)
    if text is not None:
        try:
            return int(text)
        except ValueError:
            pass
    logger.debug(f"Ignoring unparseable integer for {key}: '{value}'. Using default {default}.")
    return default


def load_app_config() -> AppConfig:
    """Builds the AppConfig from the loaded configuration sources."""
    load_configuration()
    return AppConfig(
        metrics_api_endpoint_url=get_string_config("METRICS_API_ENDPOINT_URL"),
        metrics_api_key=get_string_config("METRICS_API_KEY"),
        delivery_api_endpoint_url=get_string_config("DELIVERY_API_ENDPOINT_URL"),
        delivery_api_key=get_string_config("DELIVERY_API_KEY"),
        only_log=parse_bool_env("ONLY_LOG", False),
        shadow_traffic_delivery_rate=parse_float_env("SHADOW_TRAFFIC_DELIVERY_RATE", 0.0),
        blocking_shadow_traffic=parse_bool_env("BLOCKING_SHADOW_TRAFFIC", False),
        delivery_timeout_millis=parse_int_env("DELIVERY_TIMEOUT_MILLIS", DEFAULT_DELIVERY_TIMEOUT_MILLIS),
        metrics_timeout_millis=parse_int_env("METRICS_TIMEOUT_MILLIS", DEFAULT_METRICS_TIMEOUT_MILLIS),
        perform_checks=parse_bool_env("PERFORM_CHECKS", False),
    )


def validate_config(config: AppConfig) -> None:
    """Raises ConfigurationError for the first missing or invalid setting."""
    if not config.metrics_api_endpoint_url:
        raise ConfigurationError("metricsApiEndpointUrl needs to be specified")
    if not config.metrics_api_key:
        raise ConfigurationError("metricsApiKey needs to be specified")
    if not config.delivery_api_endpoint_url:
        raise ConfigurationError("deliveryApiEndpointUrl needs to be specified")
    if not config.delivery_api_key:
        raise ConfigurationError("deliveryApiKey needs to be specified")
    # NaN fails both comparisons, so test the accepted range directly
    if not 0.0 <= config.shadow_traffic_delivery_rate <= 1.0:
        raise ConfigurationError("shadowTrafficDeliveryRate must be between 0 and 1")
    if config.delivery_timeout_millis <= 0:
        raise ConfigurationError("deliveryTimeoutMillis must be positive")
    if config.metrics_timeout_millis <= 0:
        raise ConfigurationError("metricsTimeoutMillis must be positive")


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update({key.upper(): value for key, value in config_dict.items()})
    logger.debug(f"Set testing configuration: {list(config_dict)}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")
