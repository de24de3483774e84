"""
Configuration management for the Ruuvi Collector.
Loads configuration from environment variables with validation and defaults.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Union
from dotenv import load_dotenv
import logging


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


def normalize_mac(value: str) -> Optional[str]:
    """
    Normalise a MAC address to 12 upper-case hex characters.

    Separators (``:`` and ``-``) are removed. Returns None when the result is
    not exactly 12 characters long.
    """
    mac = value.strip().replace(":", "").replace("-", "").upper()
    if len(mac) != 12:
        return None
    return mac


class Config:
    """
    Configuration manager that loads settings from environment variables.
    Provides validation and type conversion for configuration values.
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            env_file: Path to .env file (defaults to .env in the working directory)
        """
        self.logger = logging.getLogger(__name__)

        if env_file is None:
            env_file = Path.cwd() / ".env"

        if Path(env_file).exists():
            load_dotenv(env_file)
            self.logger.info(f"Loaded configuration from {env_file}")
        else:
            self.logger.debug(f"Environment file {env_file} not found, using system environment")

    def get_str(self, key: str, default: Optional[str] = None) -> str:
        """Get string configuration value."""
        value = os.getenv(key, default)
        if value is None:
            raise ConfigurationError(f"Required configuration key '{key}' not found")
        return value

    def get_int(self, key: str, default: Optional[int] = None) -> int:
        """Get integer configuration value."""
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Required configuration key '{key}' not found")
            return default

        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"Configuration key '{key}' must be an integer, got '{value}'")

    def get_float(self, key: str, default: Optional[float] = None) -> float:
        """Get float configuration value."""
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Required configuration key '{key}' not found")
            return default

        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"Configuration key '{key}' must be a float, got '{value}'")

    def get_bool(self, key: str, default: Optional[bool] = None) -> bool:
        """Get boolean configuration value."""
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Required configuration key '{key}' not found")
            return default

        return value.lower() in ('true', '1', 'yes', 'on', 'enabled')

    def get_path(self, key: str, default: Optional[Union[str, Path]] = None) -> Path:
        """Get path configuration value."""
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise ConfigurationError(f"Required configuration key '{key}' not found")
            value = str(default)

        path = Path(value)
        if not path.is_absolute():
            path = Path.cwd() / path

        return path

    def get_list(self, key: str, default: str = "") -> List[str]:
        """Get comma separated list configuration value, blank entries dropped."""
        value = os.getenv(key, default)
        return [item.strip() for item in value.split(",") if item.strip()]

    def get_mac_mapping(self, key: str) -> Dict[str, str]:
        """
        Get a ``MAC=value`` comma separated mapping.

        Keys are normalised with normalize_mac; entries with a malformed MAC
        or an empty value are skipped with a warning.
        """
        mapping = {}
        for entry in self.get_list(key):
            mac, sep, value = entry.partition("=")
            normalized = normalize_mac(mac)
            if not sep or normalized is None or not value.strip():
                self.logger.warning(f"Ignoring malformed entry in {key}: '{entry}'")
                continue
            mapping[normalized] = value.strip()
        return mapping

    # Limiting strategy configuration
    @property
    def update_limit_ms(self) -> int:
        return self.get_int("RUUVI_UPDATE_LIMIT_MS", 9900)

    @property
    def update_limit_inclusive(self) -> bool:
        return self.get_bool("RUUVI_UPDATE_LIMIT_INCLUSIVE", True)

    @property
    def motion_threshold(self) -> float:
        return self.get_float("RUUVI_MOTION_THRESHOLD", 0.05)

    @property
    def history_size(self) -> int:
        return self.get_int("RUUVI_HISTORY_SIZE", 3)

    @property
    def limiting_strategy(self) -> str:
        return self.get_str("RUUVI_LIMITING_STRATEGY", "motion").lower()

    @property
    def tag_strategies(self) -> Dict[str, str]:
        """Per-MAC strategy overrides."""
        return {mac: kind.lower() for mac, kind in self.get_mac_mapping("RUUVI_TAG_STRATEGIES").items()}

    # Measurement enrichment
    @property
    def receiver(self) -> str:
        return self.get_str("RUUVI_RECEIVER", "")

    @property
    def tag_names(self) -> Dict[str, str]:
        return self.get_mac_mapping("RUUVI_TAG_NAMES")

    # MAC filtering
    @property
    def filter_mode(self) -> str:
        return self.get_str("RUUVI_FILTER_MODE", "all").lower()

    @property
    def filter_macs(self) -> List[str]:
        macs = []
        for value in self.get_list("RUUVI_FILTER_MACS"):
            mac = normalize_mac(value)
            if mac is None:
                self.logger.warning(f"Ignoring malformed MAC in RUUVI_FILTER_MACS: '{value}'")
                continue
            macs.append(mac)
        return macs

    # Storage configuration
    @property
    def storage_values(self) -> str:
        return self.get_str("RUUVI_STORAGE_VALUES", "extended").lower()

    @property
    def storage_values_list(self) -> List[str]:
        return self.get_list("RUUVI_STORAGE_VALUES_LIST")

    # Logging Configuration
    @property
    def log_level(self) -> str:
        return self.get_str("LOG_LEVEL", "INFO").upper()

    @property
    def log_dir(self) -> Path:
        return self.get_path("LOG_DIR", "./logs")

    @property
    def log_max_file_size(self) -> int:
        return self.get_int("LOG_MAX_FILE_SIZE", 10 * 1024 * 1024)  # 10MB

    @property
    def log_backup_count(self) -> int:
        return self.get_int("LOG_BACKUP_COUNT", 5)

    @property
    def log_enable_console(self) -> bool:
        return self.get_bool("LOG_ENABLE_CONSOLE", True)

    @property
    def log_enable_file(self) -> bool:
        return self.get_bool("LOG_ENABLE_FILE", False)

    def validate_configuration(self) -> bool:
        """
        Validate all configuration values.

        Returns:
            bool: True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        errors = []

        # Validate limiting strategy configuration
        try:
            if self.update_limit_ms < 0:
                errors.append("RUUVI_UPDATE_LIMIT_MS cannot be negative")
            if self.motion_threshold < 0:
                errors.append("RUUVI_MOTION_THRESHOLD cannot be negative")
            if self.history_size < 1:
                errors.append("RUUVI_HISTORY_SIZE must be at least 1")
            valid_strategies = ['motion', 'time']
            if self.limiting_strategy not in valid_strategies:
                errors.append(f"RUUVI_LIMITING_STRATEGY must be one of {valid_strategies}")
            for mac, kind in self.tag_strategies.items():
                if kind not in valid_strategies:
                    errors.append(f"RUUVI_TAG_STRATEGIES entry for {mac} must be one of {valid_strategies}")
        except ConfigurationError as e:
            errors.append(str(e))

        # Validate filtering configuration
        try:
            valid_modes = ['all', 'blacklist', 'whitelist', 'named']
            if self.filter_mode not in valid_modes:
                errors.append(f"RUUVI_FILTER_MODE must be one of {valid_modes}")
            elif self.filter_mode == 'named' and not self.tag_names:
                errors.append("RUUVI_FILTER_MODE=named requires RUUVI_TAG_NAMES to be populated")
        except ConfigurationError as e:
            errors.append(str(e))

        # Validate storage configuration
        try:
            valid_values = ['raw', 'extended', 'whitelist', 'blacklist']
            if self.storage_values not in valid_values:
                errors.append(f"RUUVI_STORAGE_VALUES must be one of {valid_values}")
        except ConfigurationError as e:
            errors.append(str(e))

        # Validate log level
        try:
            valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
            if self.log_level not in valid_levels:
                errors.append(f"LOG_LEVEL must be one of {valid_levels}")
        except ConfigurationError as e:
            errors.append(str(e))

        if errors:
            raise ConfigurationError("Configuration validation failed:\n" + "\n".join(f"- {error}" for error in errors))

        return True

    def get_summary(self) -> dict:
        """Get configuration summary for logging/debugging."""
        return {
            'strategy': {
                'kind': self.limiting_strategy,
                'update_limit_ms': self.update_limit_ms,
                'update_limit_inclusive': self.update_limit_inclusive,
                'motion_threshold': self.motion_threshold,
                'history_size': self.history_size,
                'tag_overrides': len(self.tag_strategies),
            },
            'enrichment': {
                'receiver': self.receiver,
                'named_tags': len(self.tag_names),
            },
            'filter': {
                'mode': self.filter_mode,
                'macs': len(self.filter_macs),
            },
            'storage': {
                'values': self.storage_values,
                'values_list': self.storage_values_list,
            },
            'logging': {
                'level': self.log_level,
                'dir': str(self.log_dir),
                'enable_console': self.log_enable_console,
                'enable_file': self.log_enable_file,
            },
        }
