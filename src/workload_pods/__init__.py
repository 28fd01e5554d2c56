"""workload-pods: resolve the live pods of Kubernetes workloads."""

from workload_pods.__version__ import __version__

__all__ = ["__version__"]
