"""
Config Protocol - Interface for configuration management.

Defines the contract for configuration access without requiring concrete Config import.
Tests pass lightweight stand-ins that satisfy the same members.
"""

from typing import Any, Dict, Protocol


class ConfigProtocol(Protocol):
    """Protocol defining the configuration members the pipeline reads."""

    # ===== Private Keys =====
    @property
    def GOOGLE_STUDIO_API_KEY(self) -> str | None: ...

    @property
    def COINGECKO_API_KEY(self) -> str | None: ...

    # ===== General =====
    @property
    def LOGGER_DEBUG(self) -> bool: ...

    @property
    def DEFAULT_COIN(self) -> str: ...

    @property
    def DEFAULT_CURRENCY(self) -> str: ...

    @property
    def DEFAULT_RANGE_DAYS(self) -> int: ...

    @property
    def LOG_DIR(self) -> str: ...

    # ===== Price-data provider =====
    @property
    def COINGECKO_BASE_URL(self) -> str: ...

    @property
    def REQUEST_TIMEOUT_SECONDS(self) -> float: ...

    @property
    def MAX_RETRIES(self) -> int: ...

    @property
    def RETRY_INITIAL_DELAY(self) -> float: ...

    @property
    def RETRY_BACKOFF_FACTOR(self) -> float: ...

    @property
    def RETRY_MAX_DELAY(self) -> float: ...

    # ===== Analysis =====
    @property
    def GOOGLE_STUDIO_MODEL(self) -> str: ...

    @property
    def ANALYSIS_TIMEOUT_SECONDS(self) -> float: ...

    def get_model_config(self, overrides: Dict[str, Any] = None) -> Dict[str, Any]: ...
