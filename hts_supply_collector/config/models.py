"""
Configuration data models and validation.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..utils.entity_id_utils import EntityIDUtils

SUPPORTED_SCHEMES = ("https", "http")
SUPPORTED_OUTPUT_FORMATS = ("csv", "json")
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class MirrorConfig:
    """Mirror node connection configuration."""
    host: str = "mainnet-public.mirrornode.hedera.com"
    scheme: str = "https"
    timeout: Optional[float] = None  # seconds, None waits indefinitely
    keep_alive: bool = True


@dataclass
class TokenConfig:
    """Default token to aggregate when none is given on the command line."""
    token_id: Optional[str] = None
    treasuries: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "WARNING"
    structured: bool = False
    log_file: Optional[str] = None


@dataclass
class OutputConfig:
    """Report output configuration."""
    format: str = "csv"


@dataclass
class SupplyConfig:
    """Main configuration container."""
    mirror: MirrorConfig = field(default_factory=MirrorConfig)
    token: TokenConfig = field(default_factory=TokenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration settings.

        Returns:
            List of validation errors, empty if valid
        """
        errors = []

        if not self.mirror.host:
            errors.append("Mirror host must be specified")
        elif "://" in self.mirror.host or "/" in self.mirror.host:
            errors.append(f"Mirror host must be a bare host name: {self.mirror.host}")

        if self.mirror.scheme not in SUPPORTED_SCHEMES:
            errors.append(f"Unsupported mirror scheme: {self.mirror.scheme}")

        if self.mirror.timeout is not None and self.mirror.timeout <= 0:
            errors.append("Mirror timeout must be positive")

        if self.token.token_id is not None and not EntityIDUtils.is_valid_entity_id(self.token.token_id):
            errors.append(f"Invalid token ID {self.token.token_id}")

        for treasury in self.token.treasuries:
            if not EntityIDUtils.is_valid_entity_id(treasury):
                errors.append(f"Invalid treasury ID {treasury}")

        if self.logging.level.upper() not in SUPPORTED_LOG_LEVELS:
            errors.append(f"Invalid log level: {self.logging.level}")

        if self.output.format not in SUPPORTED_OUTPUT_FORMATS:
            errors.append(f"Unsupported output format: {self.output.format}")

        return errors
