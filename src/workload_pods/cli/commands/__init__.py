"""CLI command modules."""

from workload_pods.cli.commands.pods import register_pod_commands
from workload_pods.cli.commands.status import register_status_command

__all__ = [
    "register_pod_commands",
    "register_status_command",
]
