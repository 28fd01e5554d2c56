"""CLI commands that resolve the pods of a workload.

Each command fetches the workload first so that "does not exist" and "has no
current generation" can be reported differently.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated, NoReturn

import typer

from workload_pods.cli.commands.base import (
    NamespaceOption,
    OutputOption,
    console,
    err_console,
    handle_k8s_error,
)
from workload_pods.cli.formatters import Formatter, OutputFormat, get_formatter
from workload_pods.integrations.kubernetes.exceptions import KubernetesError
from workload_pods.integrations.kubernetes.models.workloads import (
    DeploymentSummary,
    PodSummary,
    ReplicaSetSummary,
    StatefulSetSummary,
)
from workload_pods.services.kubernetes.accessor import model_for_kind

if TYPE_CHECKING:
    from workload_pods.services.kubernetes import PodResolver

# =============================================================================
# Column Definitions
# =============================================================================

POD_COLUMNS = [
    ("name", "Name"),
    ("namespace", "Namespace"),
    ("phase", "Status"),
    ("ready", "Ready"),
    ("restarts", "Restarts"),
    ("node_name", "Node"),
    ("pod_ip", "IP"),
    ("age", "Age"),
]

OWNER_KINDS = ("ReplicaSet", "StatefulSet", "Deployment")


def _not_found(kind: str, name: str, namespace: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {kind} '{name}' not found in namespace '{namespace}'")
    raise typer.Exit(1)



# =============================================================================
# Registration
# =============================================================================


def register_pod_commands(
    app: typer.Typer,
    get_resolver: Callable[[], PodResolver],
    get_output_format: Callable[[], OutputFormat] = lambda: OutputFormat.TABLE,
) -> None:
    """Register pod resolution commands.

    Args:
        app: Typer app to register commands on.
        get_resolver: Factory function that returns a PodResolver instance.
            Each command closes the resolver it gets.
        get_output_format: Output format used when ``-o`` is not given.
    """

    def formatter_for(output: OutputFormat | None) -> Formatter:
        return get_formatter(output or get_output_format(), console)

    @app.command("deployment")
    def deployment_pods(
        name: Annotated[str, typer.Argument(help="Deployment name")],
        namespace: NamespaceOption = None,
        output: OutputOption = None,
    ) -> None:
        """List the pods of a Deployment's current ReplicaSet.

        Examples:
            wpods deployment web
            wpods deployment web -n production -o yaml
        """
        try:
            with get_resolver() as resolver:
                ns = namespace or resolver.accessor.default_namespace
                deployment = resolver.accessor.get_opt(DeploymentSummary, name, ns)
                if deployment is None:
                    _not_found("Deployment", name, ns)
                pods = resolver.pods_of_deployment(deployment)
            if pods is None:
                err_console.print(
                    f"[yellow]Deployment '{name}' has no ReplicaSet matching its "
                    "current template (rollout not started?)[/yellow]"
                )
                raise typer.Exit(0)
            formatter_for(output).format_list(
                pods, POD_COLUMNS, title=f"Pods of deployment/{name}"
            )
        except KubernetesError as e:
            handle_k8s_error(e)

    @app.command("statefulset")
    def statefulset_pods(
        name: Annotated[str, typer.Argument(help="StatefulSet name")],
        namespace: NamespaceOption = None,
        output: OutputOption = None,
    ) -> None:
        """List the pods of a StatefulSet's current revision.

        Examples:
            wpods statefulset db
            wpods statefulset db -n data -o json
        """
        try:
            with get_resolver() as resolver:
                ns = namespace or resolver.accessor.default_namespace
                statefulset = resolver.accessor.get_opt(StatefulSetSummary, name, ns)
                if statefulset is None:
                    _not_found("StatefulSet", name, ns)
                pods = resolver.pods_of_statefulset(statefulset) or []
            formatter_for(output).format_list(
                pods, POD_COLUMNS, title=f"Pods of statefulset/{name}"
            )
        except KubernetesError as e:
            handle_k8s_error(e)

    @app.command("replicaset")
    def current_replicaset(
        name: Annotated[str, typer.Argument(help="Deployment name")],
        namespace: NamespaceOption = None,
        output: OutputOption = None,
    ) -> None:
        """Show the ReplicaSet serving a Deployment's current template.

        Examples:
            wpods replicaset web
            wpods replicaset web -o yaml
        """
        try:
            with get_resolver() as resolver:
                ns = namespace or resolver.accessor.default_namespace
                deployment = resolver.accessor.get_opt(DeploymentSummary, name, ns)
                if deployment is None:
                    _not_found("Deployment", name, ns)
                replica_set = resolver.current_replica_set(deployment)
            if replica_set is None:
                err_console.print(
                    f"[yellow]Deployment '{name}' has no ReplicaSet matching its "
                    "current template[/yellow]"
                )
                raise typer.Exit(0)
            formatter_for(output).format_resource(
                replica_set, title=f"ReplicaSet: {replica_set.name}"
            )
        except KubernetesError as e:
            handle_k8s_error(e)

    @app.command("owner")
    def pod_owner(
        pod: Annotated[str, typer.Argument(help="Pod name")],
        kind: Annotated[
            str,
            typer.Option("--kind", "-k", help=f"Owner kind: {', '.join(OWNER_KINDS)}"),
        ] = "ReplicaSet",
        namespace: NamespaceOption = None,
        output: OutputOption = None,
    ) -> None:
        """Show the owner of a pod.

        With --kind Deployment the pod's ReplicaSet is followed to its
        Deployment.

        Examples:
            wpods owner web-7d4b9c-x2x9z
            wpods owner db-0 --kind StatefulSet
            wpods owner web-7d4b9c-x2x9z --kind Deployment
        """
        if kind not in OWNER_KINDS:
            err_console.print(
                f"[red]Error:[/red] Unsupported owner kind '{kind}' "
                f"(choose from {', '.join(OWNER_KINDS)})"
            )
            raise typer.Exit(1)

        try:
            with get_resolver() as resolver:
                ns = namespace or resolver.accessor.default_namespace
                pod_obj = resolver.accessor.get_opt(PodSummary, pod, ns)
                if pod_obj is None:
                    _not_found("Pod", pod, ns)

                if kind == "Deployment":
                    replica_set = resolver.get_owner(pod_obj, ReplicaSetSummary)
                    owner = (
                        resolver.get_owner(replica_set, DeploymentSummary)
                        if replica_set is not None
                        else None
                    )
                else:
                    owner = resolver.get_owner(pod_obj, model_for_kind(kind))

            if owner is None:
                err_console.print(f"[yellow]Pod '{pod}' has no {kind} owner[/yellow]")
                raise typer.Exit(1)
            formatter_for(output).format_resource(owner, title=f"{kind}: {owner.name}")
        except KubernetesError as e:
            handle_k8s_error(e)
