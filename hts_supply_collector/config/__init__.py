"""
Configuration management for the HTS supply collector.
"""

from .models import (
    SupplyConfig,
    MirrorConfig,
    TokenConfig,
    LoggingConfig,
    OutputConfig
)
from .manager import ConfigManager
from .validation import (
    SupplyConfigValidator,
    validate_config_dict,
    get_env_var_mappings,
    SchemeEnum,
    OutputFormatEnum,
    LogLevelEnum
)

__all__ = [
    # Models
    'SupplyConfig',
    'MirrorConfig',
    'TokenConfig',
    'LoggingConfig',
    'OutputConfig',

    # Manager
    'ConfigManager',

    # Validation
    'SupplyConfigValidator',
    'validate_config_dict',
    'get_env_var_mappings',
    'SchemeEnum',
    'OutputFormatEnum',
    'LogLevelEnum',
]
