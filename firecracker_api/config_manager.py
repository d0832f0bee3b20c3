"""
Configuration Manager for the Firecracker API client

Provides configuration loading using the Hydra and OmegaConf frameworks.
Handles schema validation, environment-specific settings, and overrides.

Features:
- YAML-based hierarchical configuration files
- Type-safe configuration validation with dataclasses
- Environment-specific configuration profiles (development, ...)
- Parameter overrides with nested dot notation

Dependencies:
- hydra-core: Configuration composition
- omegaconf: Configuration objects with validation
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException

from .config.schema import FirecrackerApiConfig


class ConfigurationError(Exception):
    """Exception raised for configuration-related errors."""
    pass


class ConfigManager:
    """Configuration management using Hydra and OmegaConf.

    Attributes:
        config_dir (Path): Directory containing configuration files
        config (DictConfig): Currently loaded configuration
        schema_class: Configuration schema class for validation

    Example:
        config_manager = ConfigManager()
        config = config_manager.load_config("default", ["client.socket_path=/tmp/fc.sock"])
        client = MicrovmClient.from_config(config)
    """

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the configuration manager.

        Args:
            config_dir (Path, optional): Directory containing config files.
                                       Defaults to the packaged config/ directory.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)
        self.config: Optional[DictConfig] = None
        self.schema_class = FirecrackerApiConfig

    def load_config(self,
                    config_name: str = "default",
                    overrides: Optional[List[str]] = None) -> DictConfig:
        """Load configuration from YAML files with optional overrides.

        Args:
            config_name (str): Name of the configuration file to load
            overrides (List[str], optional): Overrides in dot notation
                                           (e.g., "client.pool_connections=4")

        Returns:
            DictConfig: Loaded configuration merged onto the schema defaults

        Raises:
            ConfigurationError: If configuration files are missing or invalid
        """
        if overrides is None:
            overrides = []

        if GlobalHydra().is_initialized():
            GlobalHydra.instance().clear()

        try:
            with initialize_config_dir(config_dir=str(self.config_dir.resolve()), version_base=None):
                composed = compose(config_name=config_name, overrides=overrides)
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        self.config = self.validate_config(composed)
        return self.config

    def validate_config(self, config: DictConfig) -> DictConfig:
        """Validate configuration against the schema.

        Type checking comes from merging onto the structured schema; value
        checks run in the dataclasses' ``__post_init__`` when the merged
        configuration is instantiated.

        Args:
            config (DictConfig): Configuration object to validate

        Returns:
            DictConfig: Configuration merged onto schema defaults

        Raises:
            ConfigurationError: If configuration validation fails
        """
        try:
            structured_config = OmegaConf.structured(self.schema_class)
            validated_config = OmegaConf.merge(structured_config, config)
            OmegaConf.to_object(validated_config)
        except (OmegaConfBaseException, ValueError) as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e
        return validated_config

    def merge_environment_config(self, config: DictConfig, env: str) -> DictConfig:
        """Merge environment-specific configuration overrides.

        Args:
            config (DictConfig): Base configuration
            env (str): Environment name (development, production, etc.)

        Returns:
            DictConfig: Merged configuration, unchanged if no such file exists
        """
        env_config_path = self.config_dir / f"{env}.yaml"

        if env_config_path.exists():
            env_config = OmegaConf.load(env_config_path)
            return self.validate_config(OmegaConf.merge(config, env_config))

        return config

    def get_config_summary(self, config: DictConfig) -> Dict[str, Any]:
        """Get a summary of current configuration for logging/debugging."""
        return {
            "socket_path": str(config.client.socket_path),
            "pool_connections": config.client.pool_connections,
            "timeout": config.client.timeout,
            "logging_level": config.logging.level,
            "logging_format": config.logging.format,
        }

    def save_effective_config(self, config: DictConfig, output_path: Path) -> None:
        """Save the effective configuration to a file for debugging."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w') as f:
            OmegaConf.save(config, f)

    @staticmethod
    def create_override_list(overrides_dict: Dict[str, Any]) -> List[str]:
        """Convert dictionary of overrides to Hydra override list format.

        Example:
            overrides = ConfigManager.create_override_list({
                "client": {"pool_connections": 4},
                "logging.level": "DEBUG"
            })
            # Returns: ["client.pool_connections=4", "logging.level=DEBUG"]
        """
        override_list = []

        def _flatten_dict(d: Dict[str, Any], prefix: str = "") -> None:
            for key, value in d.items():
                full_key = f"{prefix}.{key}" if prefix else key

                if isinstance(value, dict):
                    _flatten_dict(value, full_key)
                elif value is None:
                    override_list.append(f"{full_key}=null")
                else:
                    override_list.append(f"{full_key}={value}")

        _flatten_dict(overrides_dict)
        return override_list


def load_config(config_name: str = "default",
                overrides: Optional[List[str]] = None) -> DictConfig:
    """Load configuration with a default ConfigManager."""
    return ConfigManager().load_config(config_name, overrides)
