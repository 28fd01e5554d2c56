"""Status command for showing cluster connection details."""

from __future__ import annotations

import platform
from collections.abc import Callable
from typing import TYPE_CHECKING

import typer
from rich.table import Table

from workload_pods import __version__
from workload_pods.cli.commands.base import console, handle_k8s_error
from workload_pods.integrations.kubernetes.exceptions import KubernetesError
from workload_pods.logging import get_logger

if TYPE_CHECKING:
    from workload_pods.integrations.kubernetes.client import KubernetesClient

logger = get_logger(__name__)


def register_status_command(
    app: typer.Typer,
    get_client: Callable[[], KubernetesClient],
) -> None:
    """Register the ``status`` command.

    Args:
        app: Typer app to register the command on.
        get_client: Factory function that returns a KubernetesClient instance.
    """

    @app.command("status")
    def status() -> None:
        """Show the active context and whether the cluster is reachable."""
        logger.info("checking_cluster_status")

        table = Table(title="wpods Status")
        table.add_column("Component", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("CLI Version", __version__)
        table.add_row("Python", platform.python_version())

        try:
            with get_client() as client:
                table.add_row("Context", client.get_current_context())
                table.add_row("Namespace", client.default_namespace)
                if client.check_connection():
                    table.add_row("Cluster", client.get_cluster_version())
                else:
                    table.add_row("Cluster", "[red]unreachable[/red]")
        except KubernetesError as e:
            handle_k8s_error(e)

        console.print(table)
