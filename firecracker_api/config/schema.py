"""
Configuration schema for the Firecracker API client.

Dataclasses giving type safety and validation to the YAML configuration.
Used with Hydra and OmegaConf through ``OmegaConf.structured``.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ClientConfig:
    """API socket and connection pool settings."""
    socket_path: str = "/tmp/firecracker.socket"
    pool_connections: int = 9
    timeout: Optional[float] = None

    def __post_init__(self):
        """Validate client configuration values."""
        if not self.socket_path:
            raise ValueError("Client socket_path must not be empty")
        if self.pool_connections < 1:
            raise ValueError("Client pool_connections must be at least 1")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("Client timeout must be positive when set")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    format: str = "detailed"  # simple, detailed, json
    file: Optional[str] = None
    rotation: str = "100 MB"
    retention: str = "30 days"
    colorize: bool = True

    def __post_init__(self):
        """Validate logging configuration values."""
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        self.level = self.level.upper()

        valid_formats = ["simple", "detailed", "json"]
        if self.format not in valid_formats:
            raise ValueError(f"Invalid log format. Must be one of: {valid_formats}")


@dataclass
class FirecrackerApiConfig:
    """Complete configuration for the Firecracker API client."""
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
