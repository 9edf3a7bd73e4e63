"""Configuration management for ChromaDepth."""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
from dotenv import load_dotenv

from chromadepth.errors import ConfigError
from chromadepth.utils.colors import is_hex_color

CONFIG_ENV_VAR = "CHROMADEPTH_CONFIG"


def _check_hex(v: str) -> str:
    if not is_hex_color(v):
        raise ValueError(f"{v!r} is not a #RRGGBB color")
    return v


class PipelineConfig(BaseModel):
    """Depth method selected at startup."""
    method: str = Field(default="midas")
    method_params: Dict[str, float] = Field(default_factory=dict)


class GradientConfig(BaseModel):
    """Gradient endpoint colors."""
    foreground: str = Field(default="#FF0000")
    background: str = Field(default="#0000FF")

    @field_validator('foreground', 'background')
    @classmethod
    def validate_color(cls, v):
        """Validate hex color."""
        return _check_hex(v)


class EnhancementConfig(BaseModel):
    """Enhancement slider defaults."""
    brightness: float = Field(default=0.0, ge=-1.0, le=1.0)
    contrast: float = Field(default=1.0, ge=0.0, le=2.0)
    saturation: float = Field(default=1.0, ge=0.0, le=2.0)
    sharpness: float = Field(default=1.0, ge=0.0, le=2.0)
    gamma: float = Field(default=1.0, ge=0.1, le=3.0)


class EdgeConfig(BaseModel):
    """Edge overlay defaults."""
    enabled: bool = Field(default=True)
    color: str = Field(default="#000000")
    thickness: int = Field(default=2, ge=1, le=5)

    @field_validator('color')
    @classmethod
    def validate_color(cls, v):
        """Validate hex color."""
        return _check_hex(v)


class ExportConfig(BaseModel):
    """Artifact export configuration."""
    directory: str = Field(default="output")
    format: str = Field(default="png")

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        """Validate image format."""
        allowed = ['png', 'jpg', 'webp']
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"format must be one of {allowed}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO")
    console_colors: bool = Field(default=True)
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"level must be one of {allowed}")
        return v


class Settings(BaseModel):
    """Main application settings."""
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    gradient: GradientConfig = Field(default_factory=GradientConfig)
    enhancement: EnhancementConfig = Field(default_factory=EnhancementConfig)
    edge: EdgeConfig = Field(default_factory=EdgeConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """
        Load settings from YAML file and environment variables.

        Args:
            config_path: Path to a YAML file. If None, uses $CHROMADEPTH_CONFIG,
                then config/config.yaml in the project root.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigError: If the file cannot be parsed or fails validation.
        """
        # Load environment variables from .env file
        load_dotenv()

        if config_path is None:
            env_path = os.getenv(CONFIG_ENV_VAR)
            if env_path:
                config_path = Path(env_path)
            else:
                project_root = Path(__file__).parent.parent.parent
                config_path = project_root / "config" / "config.yaml"
        config_path = Path(config_path)

        # Use defaults if no config file found
        config_data: Dict[str, Any] = {}
        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"{config_path} must contain a mapping at the top level")

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


# Singleton instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[Path] = None, reload: bool = False) -> Settings:
    """
    Get application settings (singleton pattern).

    Args:
        config_path: Path to config.yaml file. Only used on first call or when reload=True.
        reload: Force reload of settings.

    Returns:
        Settings instance.
    """
    global _settings

    if _settings is None or reload:
        _settings = Settings.load(config_path)

    return _settings
