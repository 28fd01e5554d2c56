"""Logging configuration for workload_pods."""

from workload_pods.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
