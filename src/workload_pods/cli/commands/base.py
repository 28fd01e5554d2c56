"""Shared options and error handling for CLI commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from workload_pods.cli.formatters import OutputFormat
from workload_pods.integrations.kubernetes.exceptions import (
    KubernetesAuthError,
    KubernetesConnectionError,
    KubernetesError,
    KubernetesNotFoundError,
    KubernetesTimeoutError,
    KubernetesValidationError,
)

console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Common Typer Option Annotations
# =============================================================================

OutputOption = Annotated[
    OutputFormat | None,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml (defaults to config or table)",
        case_sensitive=False,
    ),
]

NamespaceOption = Annotated[
    str | None,
    typer.Option(
        "--namespace",
        "-n",
        help="Kubernetes namespace (defaults to config or 'default')",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_k8s_error(error: KubernetesError) -> None:
    """Report a Kubernetes error on stderr and exit.

    Args:
        error: The Kubernetes error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KubernetesConnectionError):
        err_console.print("[red]Error:[/red] Cannot connect to Kubernetes cluster")
        err_console.print(f"  {error.message}")
        if error.original_error:
            err_console.print(f"  Cause: {error.original_error}")
        err_console.print(
            "\n[dim]Hint: Check that your kubeconfig is valid and the cluster is reachable.[/dim]"
        )

    elif isinstance(error, KubernetesAuthError):
        err_console.print("[red]Error:[/red] Authentication/authorization failed")
        err_console.print(f"  {error.message}")
        err_console.print(
            "\n[dim]Hint: Reading pods needs get/list on deployments, statefulsets, "
            "replicasets and pods.[/dim]"
        )

    elif isinstance(error, KubernetesNotFoundError):
        err_console.print("[red]Error:[/red] Resource not found")
        err_console.print(f"  {error.message}")

    elif isinstance(error, KubernetesValidationError):
        err_console.print("[red]Error:[/red] Request rejected by the API server")
        err_console.print(f"  {error.message}")

    elif isinstance(error, KubernetesTimeoutError):
        err_console.print("[red]Error:[/red] Operation timed out")
        err_console.print(f"  {error.message}")
        err_console.print("\n[dim]Hint: Raise the timeout with WPODS_K8S_TIMEOUT.[/dim]")

    else:
        err_console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            err_console.print(f"  HTTP Status: {error.status_code}")

    raise typer.Exit(1)
