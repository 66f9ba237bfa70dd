"""Configuration system for the capture engine.

This module provides configuration management for capture engine settings,
including YAML loading, validation, and environment-specific overrides.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from .network_filter import DEFAULT_BLOCKED_RESOURCE_TYPES, DEFAULT_TRACKING_PATTERNS

logger = logging.getLogger(__name__)

ENV_VAR = 'PAGESNAP_ENV'
CONFIG_PATH_VAR = 'PAGESNAP_CONFIG'

DEFAULT_MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


class BrowserEngineType:
    """Supported browser engine types."""
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


class CaptureSettings(BaseModel):
    """Settings for browser launch, render profiles and timing."""

    environment: str = Field(default="production", description="Environment name")

    # Browser
    engine: str = Field(default=BrowserEngineType.CHROMIUM, description="Browser engine")
    headless: bool = Field(default=True, description="Run browser without a window")
    launch_args: List[str] = Field(
        default_factory=lambda: ["--no-sandbox", "--disable-setuid-sandbox"],
        description="Extra browser command-line arguments",
    )

    # Desktop profile
    desktop_width: int = Field(default=1920, gt=0)
    desktop_height: int = Field(default=1080, gt=0)
    desktop_scale: float = Field(default=3, gt=0)

    # Mobile profile
    mobile_device: Optional[str] = Field(
        default="iPhone 14 Pro Max",
        description="Preferred built-in device descriptor name",
    )
    mobile_width: int = Field(default=430, gt=0)
    mobile_height: int = Field(default=932, gt=0)
    mobile_scale: float = Field(default=3, gt=0)
    mobile_user_agent: str = Field(default=DEFAULT_MOBILE_USER_AGENT)

    # Brand snapshot profile
    brand_width: int = Field(default=1440, gt=0)
    brand_height: int = Field(default=900, gt=0)
    brand_scale: float = Field(default=2, gt=0)

    # Timing
    navigation_timeout_ms: int = Field(default=15000, gt=0)
    settle_delay_ms: int = Field(default=600, ge=0)

    # Network policy
    blocked_resource_types: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_BLOCKED_RESOURCE_TYPES)
    )
    tracking_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_TRACKING_PATTERNS)
    )

    # Admission control; None means unbounded
    max_concurrent_sessions: Optional[int] = Field(default=None, gt=0)

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v):
        valid_environments = {'production', 'staging', 'development', 'test'}
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of: {valid_environments}")
        return v

    @field_validator('engine')
    @classmethod
    def validate_engine(cls, v):
        valid_engines = {
            BrowserEngineType.CHROMIUM,
            BrowserEngineType.FIREFOX,
            BrowserEngineType.WEBKIT,
        }
        if v not in valid_engines:
            raise ValueError(f"Engine must be one of: {valid_engines}")
        return v

    def to_launch_options(self) -> Dict[str, Any]:
        """Convert to Playwright browser launch options."""
        return {
            'headless': self.headless,
            'args': list(self.launch_args),
        }


def build_settings(data: Optional[Dict[str, Any]], environment: Optional[str] = None) -> CaptureSettings:
    """Build settings from raw config data with environment overrides applied.

    Args:
        data: Parsed YAML mapping (may contain an ``environments`` section)
        environment: Environment to apply overrides for

    Returns:
        Validated CaptureSettings
    """
    data = dict(data or {})
    environments = data.pop('environments', None) or {}

    if environment:
        data['environment'] = environment
    env_name = data.get('environment', 'production')

    if env_name in environments:
        data.update(environments[env_name] or {})

    return CaptureSettings(**data)


class CaptureConfigManager:
    """Manager for capture configuration loading and caching."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to capture config YAML file. Defaults to
                $PAGESNAP_CONFIG or config/capture.yaml
        """
        self._explicit_path = config_path is not None or CONFIG_PATH_VAR in os.environ
        if config_path is None:
            config_path = os.environ.get(CONFIG_PATH_VAR)
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "capture.yaml"

        self.config_path = Path(config_path)
        self._config: Optional[CaptureSettings] = None
        self._loaded_env = None

    def load_config(self, force_reload: bool = False) -> CaptureSettings:
        """Load configuration from YAML file.

        Args:
            force_reload: Force reload even if already cached

        Returns:
            Loaded and validated configuration

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            ValueError: If configuration validation fails
        """
        current_env = os.environ.get(ENV_VAR)

        if self._config is not None and not force_reload and current_env == self._loaded_env:
            return self._config

        config_data: Dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise yaml.YAMLError(f"Invalid YAML in {self.config_path}: {e}")
        elif self._explicit_path:
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        else:
            logger.debug(f"No config file at {self.config_path}, using defaults")

        try:
            self._config = build_settings(config_data, current_env)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}")

        self._loaded_env = current_env
        logger.info(f"Loaded capture configuration (environment={self._config.environment})")
        return self._config

    @property
    def config(self) -> CaptureSettings:
        """Get current configuration, loading if necessary."""
        if self._config is None:
            return self.load_config()
        return self._config

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self.config.environment


# Global config manager instance
_config_manager: Optional[CaptureConfigManager] = None


def get_config(config_path: Optional[Union[str, Path]] = None) -> CaptureConfigManager:
    """Get global capture configuration manager.

    Args:
        config_path: Path to config file (only used on first call)

    Returns:
        Global CaptureConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = CaptureConfigManager(config_path)
    return _config_manager


def get_settings() -> CaptureSettings:
    """Get the current process-wide capture settings."""
    return get_config().config
