"""
Configuration manager for YAML/JSON files with environment overrides.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from hts_supply_collector.config.models import SupplyConfig
from hts_supply_collector.config.validation import (
    get_env_var_mappings, validate_config_dict
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager.

    Supports YAML and JSON configuration files with environment variable
    overrides. A missing configuration file is not an error; defaults plus
    any environment overrides are used instead.
    """

    def __init__(self, config_file_path: str = "config.yaml"):
        """
        Initialize configuration manager.

        Args:
            config_file_path: Path to the configuration file
        """
        self.config_file_path = os.path.abspath(config_file_path)
        self._config: Optional[SupplyConfig] = None
        self._validation_errors: list[str] = []

    def load_config(self) -> SupplyConfig:
        """
        Load configuration from file with environment variable overrides.

        Returns:
            Loaded and validated configuration

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            if os.path.exists(self.config_file_path):
                config_data = self._load_config_file()
            else:
                logger.debug(f"Configuration file {self.config_file_path} not found, using defaults")
                config_data = {}

            config_data = self._apply_env_overrides(config_data)

            validated_config = validate_config_dict(config_data)
            self._config = validated_config.to_legacy_config()
            self._validation_errors = []

            return self._config

        except ValueError as e:
            self._validation_errors = [str(e)]
            raise

        except (OSError, yaml.YAMLError) as e:
            self._validation_errors = [str(e)]
            raise ValueError(f"Configuration file could not be read: {e}") from e

    def get_config(self) -> SupplyConfig:
        """
        Get current configuration, loading if necessary.

        Returns:
            Current configuration
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def get_validation_errors(self) -> list[str]:
        """
        Get current validation errors.

        Returns:
            List of validation error messages
        """
        return self._validation_errors.copy()

    def validate_config_file(self) -> tuple[bool, list[str]]:
        """
        Validate configuration file without loading it.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        try:
            if not os.path.exists(self.config_file_path):
                return False, ["Configuration file does not exist"]

            config_data = self._load_config_file()
            config_data = self._apply_env_overrides(config_data)
            validated = validate_config_dict(config_data)

            errors = validated.to_legacy_config().validate()
            return len(errors) == 0, errors

        except Exception as e:
            return False, [str(e)]

    def create_default_config(self, force: bool = False) -> bool:
        """
        Write a default configuration file.

        Args:
            force: Overwrite an existing file

        Returns:
            True if the file was written, False if it already existed
        """
        if os.path.exists(self.config_file_path) and not force:
            return False

        default_config = {
            'mirror': {
                'host': 'mainnet-public.mirrornode.hedera.com',
                'scheme': 'https',
                'timeout': None,
                'keep_alive': True
            },
            'token': {
                'token_id': None,
                'treasuries': []
            },
            'logging': {
                'level': 'WARNING',
                'structured': False,
                'log_file': None
            },
            'output': {
                'format': 'csv'
            }
        }

        config_dir = os.path.dirname(self.config_file_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file_path, 'w') as f:
            if self.config_file_path.endswith('.json'):
                json.dump(default_config, f, indent=2)
            else:
                yaml.dump(default_config, f, default_flow_style=False, indent=2)

        logger.info(f"Wrote default configuration to {self.config_file_path}")
        return True

    def _load_config_file(self) -> Dict[str, Any]:
        """Load configuration data from file."""
        with open(self.config_file_path, 'r') as f:
            if self.config_file_path.endswith('.yaml') or self.config_file_path.endswith('.yml'):
                data = yaml.safe_load(f) or {}
            elif self.config_file_path.endswith('.json'):
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {self.config_file_path}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {self.config_file_path}")
        return data

    def _apply_env_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides to configuration."""
        env_mappings = get_env_var_mappings()

        for env_var, config_path_str in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                # "mirror.host" -> ["mirror", "host"]
                config_path = config_path_str.split('.')

                current = config_data
                for key in config_path[:-1]:
                    if not isinstance(current.get(key), dict):
                        current[key] = {}
                    current = current[key]

                final_key = config_path[-1]
                current[final_key] = self._convert_env_value(env_var, env_value)

        return config_data

    def _convert_env_value(self, env_var: str, env_value: str) -> Any:
        """Convert environment variable value to appropriate type."""
        # Float fields
        if env_var in ['HTS_MIRROR_TIMEOUT']:
            return float(env_value) if env_value.strip() else None

        # Boolean fields
        elif env_var in ['HTS_MIRROR_KEEP_ALIVE', 'HTS_LOG_STRUCTURED']:
            return env_value.lower() in ('true', '1', 'yes', 'on')

        # List fields (comma-separated)
        elif env_var in ['HTS_TREASURIES']:
            return [item.strip() for item in env_value.split(',') if item.strip()]

        # String fields (default)
        else:
            return env_value
