"""
Configuration management for the permutation test engine.

Loads and validates configuration from YAML files using Pydantic.
"""

from pathlib import Path
from typing import Any, Optional

import numpy as np
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mcpt_bars.core.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path("config/mcpt_bars.yaml")


class GridConfig(BaseModel):
    """
    Threshold grid searched by the optimizer.

    Threshold k (1-based) is k * increment, so the defaults give rise thresholds
    0.005..0.25 and drop thresholds 0.0005..0.025 (2500 combinations).
    """

    model_config = ConfigDict(frozen=True)

    rise_steps: int = Field(default=50, description="Number of long-term rise thresholds", gt=0)
    rise_increment: float = Field(default=0.005, description="Rise threshold step (log units)", gt=0)
    drop_steps: int = Field(default=50, description="Number of short-term drop thresholds", gt=0)
    drop_increment: float = Field(default=0.0005, description="Drop threshold step (log units)", gt=0)

    def rise_thresholds(self) -> np.ndarray:
        """Rise thresholds in search order."""
        return np.arange(1, self.rise_steps + 1) * self.rise_increment

    def drop_thresholds(self) -> np.ndarray:
        """Drop thresholds in search order."""
        return np.arange(1, self.drop_steps + 1) * self.drop_increment

    @property
    def n_combinations(self) -> int:
        return self.rise_steps * self.drop_steps


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="text", description="Log format (json, text)")
    log_dir: Path = Field(default=Path("logs"), description="Log directory")
    console_output: bool = Field(default=True, description="Enable console logging")
    file_output: bool = Field(default=False, description="Also write JSON logs to log_dir")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure valid logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Level must be one of {valid_levels}")
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Ensure valid log format."""
        valid_formats = {"json", "text"}
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Format must be one of {valid_formats}")
        return v_lower


class Config(BaseModel):
    """
    Main configuration container.

    Aggregates the optimizer grid and logging settings. Replication settings
    live in MCPTConfig, which reads the 'mcpt' section of the same file.
    """

    model_config = ConfigDict(frozen=True)

    grid: GridConfig = Field(default_factory=GridConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config is invalid
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid configuration in {path}: expected a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    def to_yaml(self, path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            path: Path to save YAML configuration
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="python")

        def convert_for_yaml(obj: Any) -> Any:
            """Convert non-serializable types for YAML."""
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: convert_for_yaml(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_for_yaml(item) for item in obj]
            return obj

        yaml_data = convert_for_yaml(data)

        with open(path, "w") as f:
            yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional path to config file. If None, uses config/mcpt_bars.yaml

    Returns:
        Validated Config instance
    """
    if config_path is None:
        config_path = Path("config/mcpt_bars.yaml")

    if config_path.exists():
        return Config.from_yaml(config_path)
    else:
        return Config()
