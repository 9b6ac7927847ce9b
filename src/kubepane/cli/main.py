"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from kubepane import __version__
from kubepane.core.config import ConfigError, DashboardConfig, load_config
from kubepane.integrations.kubernetes import KubernetesClient, KubernetesError
from kubepane.logging.config import configure_logging
from kubepane.services.kubernetes import PortForwardRegistry, ResourceManager
from kubepane.tui.apps.dashboard import DashboardApp, LoadDispatcher
from kubepane.tui.theme import Styles

app = typer.Typer(
    name="kubepane",
    help="Terminal dashboard for browsing and operating a Kubernetes cluster.",
    add_completion=False,
)

console = Console(stderr=True)
logger = structlog.get_logger()

STATUS_CONNECTED = "✓ K8s connected"
STATUS_INIT_FAILED = "⚠ K8s init failed: {error}"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kubepane version {__version__}")
        raise typer.Exit()


def apply_overrides(
    config: DashboardConfig,
    *,
    namespace: str | None = None,
    context: str | None = None,
    kubeconfig: Path | None = None,
    refresh_interval: float | None = None,
) -> DashboardConfig:
    """Layer command line options over the loaded configuration.

    Raises:
        ConfigError: If an override fails validation.
    """
    data: dict[str, Any] = config.model_dump()
    if namespace is not None:
        data["kubernetes"]["namespace"] = namespace
    if context is not None:
        data["kubernetes"]["context"] = context
    if kubeconfig is not None:
        data["kubernetes"]["kubeconfig"] = str(kubeconfig)
    if refresh_interval is not None:
        data["ui"]["refresh_interval"] = refresh_interval
    try:
        return DashboardConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid option: {e}") from e


def connect(config: DashboardConfig) -> tuple[KubernetesClient | None, str]:
    """Create the Kubernetes client.

    Returns:
        The client (None when initialization failed) and the status line
        the dashboard starts with.
    """
    try:
        client = KubernetesClient(config.kubernetes)
    except KubernetesError as e:
        logger.warning("kubernetes_init_failed", error=str(e))
        return None, STATUS_INIT_FAILED.format(error=e)
    logger.info("kubernetes_connected", context=client.current_context)
    return client, STATUS_CONNECTED


@app.command()
def main(
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace selected at startup.",
    ),
    context: str | None = typer.Option(
        None,
        "--context",
        help="Kubeconfig context to use.",
    ),
    kubeconfig: Path | None = typer.Option(
        None,
        "--kubeconfig",
        help="Path to the kubeconfig file.",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a kubepane YAML config file.",
    ),
    refresh_interval: float | None = typer.Option(
        None,
        "--refresh-interval",
        help="Seconds between resource list refreshes.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Browse namespaces, deployments, pods and services in a terminal dashboard."""
    # The dashboard owns the terminal, so logs only go to the log file.
    configure_logging(verbose=verbose, debug=debug, console=False)

    try:
        config = apply_overrides(
            load_config(config_path),
            namespace=namespace,
            context=context,
            kubeconfig=kubeconfig,
            refresh_interval=refresh_interval,
        )
    except ConfigError as e:
        console.print(f"{Styles.error('Error:')} {escape(str(e))}")
        raise typer.Exit(1) from None

    client, status = connect(config)
    if client is None:
        console.print(Styles.warning(escape(status)))
    manager = ResourceManager(client) if client is not None else None
    registry = PortForwardRegistry()
    dashboard = DashboardApp(
        LoadDispatcher(manager, tail_lines=config.ui.log_tail_lines),
        registry,
        namespace=config.kubernetes.namespace,
        status=status,
        refresh_interval=config.ui.refresh_interval,
        local_port=config.port_forward.local_port,
        remote_port=config.port_forward.remote_port,
    )
    try:
        dashboard.run()
    finally:
        registry.stop_all()
        if client is not None:
            client.close()


if __name__ == "__main__":
    app()
