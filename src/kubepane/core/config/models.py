"""Configuration models and loader.

Configuration is read from a YAML file, overridden by ``KUBEPANE_*``
environment variables; command-line options are applied on top by the CLI.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kubepane.integrations.kubernetes.config import KubernetesConfig

logger = structlog.get_logger()

CONFIG_SEARCH_PATHS: tuple[Path, ...] = (
    Path.home() / ".config" / "kubepane" / "config.yaml",
    Path("/etc/kubepane/config.yaml"),
    Path("config.yaml"),
)


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class UIConfig(BaseModel):
    """Dashboard behaviour settings."""

    model_config = ConfigDict(extra="forbid")

    refresh_interval: float = Field(default=5.0, description="Seconds between list refreshes")
    log_tail_lines: int = Field(default=100, description="Log lines fetched per pod")

    @field_validator("refresh_interval")
    @classmethod
    def validate_refresh_interval(cls, v: float) -> float:
        """Validate refresh interval is positive."""
        if v <= 0:
            raise ValueError("refresh_interval must be positive")
        return v

    @field_validator("log_tail_lines")
    @classmethod
    def validate_log_tail_lines(cls, v: int) -> int:
        """Validate log_tail_lines is positive."""
        if v <= 0:
            raise ValueError("log_tail_lines must be positive")
        return v


class PortForwardConfig(BaseModel):
    """Ports used by the port-forward action."""

    model_config = ConfigDict(extra="forbid")

    local_port: int = 8080
    remote_port: int = 80

    @field_validator("local_port", "remote_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in range."""
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v


class DashboardConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(extra="forbid")

    kubernetes: KubernetesConfig = Field(default_factory=KubernetesConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    port_forward: PortForwardConfig = Field(default_factory=PortForwardConfig)

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> DashboardConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            KUBEPANE_KUBECONFIG: Kubeconfig path
            KUBEPANE_CONTEXT: Kubeconfig context
            KUBEPANE_NAMESPACE: Initial namespace
            KUBEPANE_REFRESH_INTERVAL: Seconds between list refreshes
        """
        config_dict = dict(base_config) if base_config else {}
        kube = dict(config_dict.get("kubernetes") or {})
        ui = dict(config_dict.get("ui") or {})

        if kubeconfig := os.environ.get("KUBEPANE_KUBECONFIG"):
            kube["kubeconfig"] = kubeconfig
        if context := os.environ.get("KUBEPANE_CONTEXT"):
            kube["context"] = context
        if namespace := os.environ.get("KUBEPANE_NAMESPACE"):
            kube["namespace"] = namespace
        if interval := os.environ.get("KUBEPANE_REFRESH_INTERVAL"):
            ui["refresh_interval"] = interval

        config_dict["kubernetes"] = kube
        config_dict["ui"] = ui
        return cls.model_validate(config_dict)


def find_config_file() -> Path | None:
    """Return the first existing file from CONFIG_SEARCH_PATHS."""
    for candidate in CONFIG_SEARCH_PATHS:
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None) -> DashboardConfig:
    """Load configuration from YAML and the environment.

    Args:
        path: Explicit config file. Must exist when given. When omitted the
            standard search paths are tried; if none exists, defaults apply.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing, unreadable, not a mapping, or
            fails validation.
    """
    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    source = path or find_config_file()
    data: dict[str, Any] = {}
    if source is not None:
        try:
            with source.open(encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {source}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"Config file {source} must contain a mapping")
        data = loaded or {}
        logger.debug("loaded_config_file", path=str(source))

    try:
        return DashboardConfig.from_env(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
