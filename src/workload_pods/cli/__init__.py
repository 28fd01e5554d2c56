"""Command line interface for workload-pods."""
