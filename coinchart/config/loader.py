"""
Configuration loader for coinchart.
Loads private keys from keys.env and public configuration from config/config.ini.
Both files are optional: missing values fall back to the defaults below.
"""

import configparser
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, TYPE_CHECKING

from dotenv import dotenv_values

if TYPE_CHECKING:
    from coinchart.contracts.config import ConfigProtocol

ROOT_DIR = Path(__file__).parent.parent.parent.resolve()
CONFIG_DIR = ROOT_DIR / "config"
KEYS_ENV_PATH = ROOT_DIR / "keys.env"
CONFIG_INI_PATH = CONFIG_DIR / "config.ini"

# Values shipped in templates, e.g. YOUR_GEMINI_API_KEY_HERE or <api-key>
_PLACEHOLDER_PATTERN = re.compile(r"^(your[_-].*|<.*>|changeme|none|null)$", re.IGNORECASE)

_SECRET_KEYS = ("GOOGLE_STUDIO_API_KEY", "COINGECKO_API_KEY")


class Config:
    """Configuration class that loads settings from environment and INI files.

    Implements ConfigProtocol for type safety and dependency injection.
    """

    def __init__(self, config_path: Optional[Path] = None, keys_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else CONFIG_INI_PATH
        self.keys_path = Path(keys_path) if keys_path else KEYS_ENV_PATH
        self._env_vars: Dict[str, Any] = {}
        self._config_data: Dict[str, Dict[str, Any]] = {}
        self._load_environment()
        self._load_ini_config()

    def _load_environment(self):
        """Load secrets from keys.env, falling back to the process environment."""
        if self.keys_path.exists():
            try:
                for key, value in dotenv_values(self.keys_path).items():
                    if value is not None:
                        self._env_vars[key] = value.strip()
            except Exception as e:
                raise RuntimeError(f"Error loading environment file {self.keys_path}: {e}")

        for key in _SECRET_KEYS:
            if not self._env_vars.get(key) and os.environ.get(key):
                self._env_vars[key] = os.environ[key].strip()

    def _load_ini_config(self):
        """Load configuration from config.ini."""
        if not self.config_path.exists():
            logging.debug("Configuration file %s not found, using defaults", self.config_path)
            return

        try:
            parser = configparser.ConfigParser()
            parser.read(self.config_path, encoding='utf-8')

            for section_name in parser.sections():
                self._config_data[section_name] = {
                    key: self._convert_value(value) for key, value in parser.items(section_name)
                }
        except configparser.Error as e:
            raise RuntimeError(f"Error loading configuration file {self.config_path}: {e}")

    @staticmethod
    def _convert_value(value: str) -> Any:
        """Convert string values to appropriate Python types."""
        lowered = value.lower()
        if lowered in ('true', 'yes', 'on'):
            return True
        if lowered in ('false', 'no', 'off'):
            return False

        if value.isdigit():
            return int(value)

        try:
            if '.' in value:
                return float(value)
        except ValueError:
            pass

        if ',' in value:
            return [item.strip() for item in value.split(',')]

        return value

    @staticmethod
    def _clean_secret(value: Any) -> Optional[str]:
        """Normalize empty or template placeholder secrets to None."""
        if value is None:
            return None
        text = str(value).strip()
        if not text or _PLACEHOLDER_PATTERN.match(text):
            return None
        return text

    def get_env(self, key: str, default: Any = None) -> Any:
        """Get environment variable."""
        return self._env_vars.get(key, default)

    def get_config(self, section: str, key: str, default: Any = None) -> Any:
        """Get configuration value from INI file."""
        return self._config_data.get(section, {}).get(key, default)

    # Private keys
    @property
    def GOOGLE_STUDIO_API_KEY(self):
        return self._clean_secret(self.get_env('GOOGLE_STUDIO_API_KEY'))

    @property
    def COINGECKO_API_KEY(self):
        return self._clean_secret(self.get_env('COINGECKO_API_KEY'))

    # General
    @property
    def LOGGER_DEBUG(self):
        return self.get_config('general', 'logger_debug', False)

    @property
    def DEFAULT_COIN(self):
        return self.get_config('general', 'default_coin', 'bitcoin')

    @property
    def DEFAULT_CURRENCY(self):
        return self.get_config('general', 'default_currency', 'usd')

    @property
    def DEFAULT_RANGE_DAYS(self):
        return int(self.get_config('general', 'default_range_days', 7))

    @property
    def LOG_DIR(self):
        return self.get_config('directories', 'log_dir', 'logs')

    # CoinGecko
    @property
    def COINGECKO_BASE_URL(self):
        return str(self.get_config('coingecko', 'base_url', 'https://api.coingecko.com/api/v3')).rstrip('/')

    # HTTP behaviour
    @property
    def REQUEST_TIMEOUT_SECONDS(self):
        """Upper bound for a single price-data request."""
        return float(self.get_config('http', 'request_timeout_seconds', 15))

    @property
    def MAX_RETRIES(self):
        """Retries on transport failures only. Never negative, never infinite."""
        return max(0, int(self.get_config('http', 'max_retries', 2)))

    @property
    def RETRY_INITIAL_DELAY(self):
        return float(self.get_config('http', 'retry_initial_delay', 1.0))

    @property
    def RETRY_BACKOFF_FACTOR(self):
        return float(self.get_config('http', 'retry_backoff_factor', 2.0))

    @property
    def RETRY_MAX_DELAY(self):
        return float(self.get_config('http', 'retry_max_delay', 10.0))

    # Analysis
    @property
    def GOOGLE_STUDIO_MODEL(self):
        return self.get_config('analysis', 'google_studio_model', 'gemini-2.0-flash')

    @property
    def ANALYSIS_TIMEOUT_SECONDS(self):
        return float(self.get_config('analysis', 'request_timeout_seconds', 30))

    def get_model_config(self, overrides: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Get generation parameters for the analysis model.

        Args:
            overrides: Optional parameter overrides for this specific call

        Returns:
            A dictionary with configuration parameters, unset values removed
        """
        base = {
            "temperature": self.get_config('analysis', 'temperature', None),
            "top_p": self.get_config('analysis', 'top_p', None),
            "top_k": self.get_config('analysis', 'top_k', None),
            "max_tokens": self.get_config('analysis', 'max_tokens', None),
        }
        if overrides:
            base.update(overrides)
        return {k: v for k, v in base.items() if v is not None}


# Create global config instance
config = Config()
