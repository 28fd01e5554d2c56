"""Version information for workload_pods."""

__version__ = "0.1.0"
