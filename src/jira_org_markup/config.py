"""
Configuration management for jira-org-markup
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .headings import CLAMP, validate_heading_overflow

logger = logging.getLogger(__name__)

DEFAULT_BASE_HEADING_LEVEL = 2


def is_log_level(name: str) -> bool:
    """Check a logging level name such as "DEBUG"."""
    return isinstance(logging.getLevelName(name), int)


class Config:
    """Configuration manager for jira-org-markup"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration

        Args:
            config_path: Path to configuration file. If None, uses the global config file.
        """
        self.config_data = {}
        self.custom_config_path = config_path

        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = self._get_config_dir() / "config.yaml"
        self._load()

    def _get_config_dir(self) -> Path:
        """Get configuration directory"""
        # Use XDG config directory
        return Path.home() / ".config" / "jira-org-markup"

    def _load(self):
        """Load configuration from file"""
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r') as f:
                    self.config_data = yaml.safe_load(f) or {}
                logger.debug(f"Loaded configuration from {self.config_path}")
            else:
                if self.custom_config_path:
                    logger.warning(f"Custom configuration file not found: {self.config_path}")
                else:
                    logger.debug("No configuration file found, using defaults")
                self.config_data = {}
        except Exception as e:
            logger.error(f"Error loading configuration: {e}")
            self.config_data = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key (e.g., 'org.base_heading_level')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._get_nested_value(self.config_data, key)
        if value is not None:
            return value
        return default

    def _get_nested_value(self, data: Dict[str, Any], key: str) -> Any:
        """Get nested value from dictionary using dot notation"""
        keys = key.split('.')
        value = data

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value using dot notation

        Args:
            key: Configuration key (e.g., 'org.heading_overflow')
            value: Value to set
        """
        keys = key.split('.')
        config = self.config_data

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def save(self):
        """Save configuration to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.dump(self.config_data, f, default_flow_style=False)
        logger.info(f"Configuration saved to {self.config_path}")

    @property
    def config_path_info(self) -> str:
        """Get information about the configuration path being used"""
        if self.custom_config_path:
            return f"Custom: {self.config_path}"
        return f"Global: {self.config_path}"

    # Convenience properties for common config values
    @property
    def base_heading_level(self) -> int:
        """Outline depth that converted Jira headings are rendered under"""
        value = self.get('org.base_heading_level', DEFAULT_BASE_HEADING_LEVEL)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid org.base_heading_level {value!r}, "
                           f"using {DEFAULT_BASE_HEADING_LEVEL}")
            return DEFAULT_BASE_HEADING_LEVEL

    @property
    def heading_overflow(self) -> str:
        """Policy for Org headings deeper than h6"""
        value = self.get('org.heading_overflow', CLAMP)
        try:
            return validate_heading_overflow(value)
        except ValueError as e:
            logger.warning(f"{e}, using {CLAMP}")
            return CLAMP

    @property
    def log_level(self) -> str:
        """Get log level"""
        value = str(self.get('log_level', 'INFO')).upper()
        if not is_log_level(value):
            logger.warning(f"Unknown log level {value!r}, using INFO")
            return 'INFO'
        return value
