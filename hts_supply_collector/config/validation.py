"""
Configuration validation using Pydantic.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..utils.entity_id_utils import EntityIDUtils


class SchemeEnum(str, Enum):
    """Supported mirror node transports."""
    HTTPS = "https"
    HTTP = "http"


class OutputFormatEnum(str, Enum):
    """Supported report formats."""
    CSV = "csv"
    JSON = "json"


class LogLevelEnum(str, Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class MirrorConfigValidator(BaseModel):
    """Pydantic model for mirror node configuration validation."""
    host: str = Field(
        default="mainnet-public.mirrornode.hedera.com",
        description="Mirror node host name (no scheme, no path)"
    )
    scheme: SchemeEnum = Field(default=SchemeEnum.HTTPS, description="Transport scheme")
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds, unset waits indefinitely"
    )
    keep_alive: bool = Field(default=True, description="Reuse connections within one run")

    @field_validator('host')
    @classmethod
    def validate_host(cls, v):
        """Validate mirror host format."""
        v = v.strip()
        if not v:
            raise ValueError("Mirror host cannot be empty")
        if '://' in v or '/' in v:
            raise ValueError(f"Mirror host must be a bare host name: {v}")
        return v


class TokenConfigValidator(BaseModel):
    """Pydantic model for the default token target."""
    token_id: Optional[str] = Field(default=None, description="Token ID in shard.realm.num format")
    treasuries: List[str] = Field(default_factory=list, description="Treasury account IDs")

    @field_validator('token_id')
    @classmethod
    def validate_token_id(cls, v):
        """Validate token ID format."""
        if v is not None and not EntityIDUtils.is_valid_entity_id(v):
            raise ValueError(f"Invalid token ID {v}")
        return v

    @field_validator('treasuries')
    @classmethod
    def validate_treasuries(cls, v):
        """Validate treasury account ID formats."""
        for treasury in v:
            if not EntityIDUtils.is_valid_entity_id(treasury):
                raise ValueError(f"Invalid treasury ID {treasury}")
        return v


class LoggingConfigValidator(BaseModel):
    """Pydantic model for logging configuration validation."""
    level: LogLevelEnum = Field(default=LogLevelEnum.WARNING, description="Root log level")
    structured: bool = Field(default=False, description="Emit JSON log records")
    log_file: Optional[str] = Field(default=None, description="Rotating log file path")

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class OutputConfigValidator(BaseModel):
    """Pydantic model for output configuration validation."""
    format: OutputFormatEnum = Field(default=OutputFormatEnum.CSV, description="Report format")


class SupplyConfigValidator(BaseModel):
    """Main configuration validator using Pydantic."""
    mirror: MirrorConfigValidator = Field(default_factory=MirrorConfigValidator)
    token: TokenConfigValidator = Field(default_factory=TokenConfigValidator)
    logging: LoggingConfigValidator = Field(default_factory=LoggingConfigValidator)
    output: OutputConfigValidator = Field(default_factory=OutputConfigValidator)

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",  # Prevent extra fields
    }

    def to_legacy_config(self) -> 'SupplyConfig':
        """Convert to the dataclass configuration used by the rest of the package."""
        from hts_supply_collector.config.models import (
            LoggingConfig, MirrorConfig, OutputConfig, SupplyConfig, TokenConfig
        )

        return SupplyConfig(
            mirror=MirrorConfig(
                host=self.mirror.host,
                scheme=self.mirror.scheme.value,
                timeout=self.mirror.timeout,
                keep_alive=self.mirror.keep_alive
            ),
            token=TokenConfig(
                token_id=self.token.token_id,
                treasuries=list(self.token.treasuries)
            ),
            logging=LoggingConfig(
                level=self.logging.level.value,
                structured=self.logging.structured,
                log_file=self.logging.log_file
            ),
            output=OutputConfig(
                format=self.output.format.value
            )
        )


def validate_config_dict(config_data: Dict[str, Any]) -> SupplyConfigValidator:
    """
    Validate configuration dictionary using Pydantic.

    Args:
        config_data: Configuration dictionary

    Returns:
        Validated configuration object

    Raises:
        ValueError: If validation fails
    """
    try:
        return SupplyConfigValidator(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")


def get_env_var_mappings() -> Dict[str, str]:
    """
    Get mapping of environment variables to configuration paths.

    Returns:
        Dictionary mapping environment variable names to config paths
    """
    return {
        # Mirror node configuration
        'HTS_MIRROR_HOST': 'mirror.host',
        'HTS_MIRROR_SCHEME': 'mirror.scheme',
        'HTS_MIRROR_TIMEOUT': 'mirror.timeout',
        'HTS_MIRROR_KEEP_ALIVE': 'mirror.keep_alive',

        # Token configuration
        'HTS_TOKEN_ID': 'token.token_id',
        'HTS_TREASURIES': 'token.treasuries',

        # Logging configuration
        'HTS_LOG_LEVEL': 'logging.level',
        'HTS_LOG_STRUCTURED': 'logging.structured',
        'HTS_LOG_FILE': 'logging.log_file',

        # Output configuration
        'HTS_OUTPUT_FORMAT': 'output.format',
    }
