"""Application configuration."""

from kubepane.core.config.models import (
    CONFIG_SEARCH_PATHS,
    ConfigError,
    DashboardConfig,
    PortForwardConfig,
    UIConfig,
    load_config,
)

__all__ = [
    "CONFIG_SEARCH_PATHS",
    "ConfigError",
    "DashboardConfig",
    "PortForwardConfig",
    "UIConfig",
    "load_config",
]
