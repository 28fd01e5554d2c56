"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from workload_pods import __version__
from workload_pods.cli.commands import register_pod_commands, register_status_command
from workload_pods.cli.formatters import OutputFormat
from workload_pods.integrations.kubernetes.client import KubernetesClient
from workload_pods.integrations.kubernetes.config import (
    ConfigError,
    KubernetesConfig,
    load_config,
)
from workload_pods.logging.config import configure_logging
from workload_pods.services.kubernetes import PodResolver

app = typer.Typer(
    name="wpods",
    help="Find the pods a Deployment or StatefulSet currently runs.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

# Set by the callback before any command runs
_config_path: Path | None = None


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"wpods version {__version__}")
        raise typer.Exit()


def _load_config() -> KubernetesConfig:
    """The config file with WPODS_K8S_* overrides; exits 1 if it is invalid."""
    try:
        return load_config(_config_path)
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def get_client() -> KubernetesClient:
    return KubernetesClient(_load_config())


def get_resolver() -> PodResolver:
    return PodResolver(get_client())


def get_output_format() -> OutputFormat:
    """``output_format`` from config, used when a command gets no ``-o``."""
    return OutputFormat(_load_config().output_format)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a config file (default: ~/.config/wpods/config.yaml).",
    ),
) -> None:
    """wpods - resolve workloads to their live pods."""
    global _config_path
    _config_path = config
    configure_logging(verbose=verbose, debug=debug)


register_pod_commands(app, get_resolver, get_output_format)
register_status_command(app, get_client)


if __name__ == "__main__":
    app()
