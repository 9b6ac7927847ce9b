"""Kubernetes connection configuration."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


def resolve_kubeconfig_path(explicit: str | None = None) -> str:
    """Work out which kubeconfig file to load.

    Order: an explicit path, the ``KUBECONFIG`` environment variable, then
    ``~/.kube/config``. When running as root through sudo the invoking
    user's home directory is used instead of ``/root``.

    Args:
        explicit: Path given in configuration or on the command line.

    Returns:
        Absolute path of the kubeconfig file (it may not exist).
    """
    if explicit:
        return str(Path(explicit).expanduser())
    if env_path := os.environ.get("KUBECONFIG"):
        return str(Path(env_path).expanduser())

    home = Path.home()
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user and str(home) == "/root":
        home = Path("/home") / sudo_user
    return str(home / ".kube" / "config")


class KubernetesConfig(BaseModel):
    """Cluster connection settings."""

    model_config = ConfigDict(extra="forbid")

    kubeconfig: str | None = None
    context: str | None = None
    namespace: str = "default"
    timeout: int = 30
    retry_attempts: int = 3

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("retry_attempts")
    @classmethod
    def validate_retry_attempts(cls, v: int) -> int:
        """Validate retry_attempts is at least one."""
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Reject an empty namespace."""
        if not v.strip():
            raise ValueError("namespace must not be empty")
        return v.strip()

    @property
    def kubeconfig_path(self) -> str:
        """Resolved kubeconfig path."""
        return resolve_kubeconfig_path(self.kubeconfig)
