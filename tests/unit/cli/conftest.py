"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from rich.console import Console

from workload_pods.cli import main as main_module
from workload_pods.cli.commands import base as base_module
from workload_pods.cli.commands import pods as pods_module
from workload_pods.cli.commands import status as status_module
from workload_pods.logging import config as logging_config
from workload_pods.services.kubernetes import PodResolver


@pytest.fixture(autouse=True)
def wide_consoles(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use wide consoles so table cells and messages are not wrapped."""
    console = Console(width=200)
    err_console = Console(stderr=True, width=200)
    monkeypatch.setattr(base_module, "console", console)
    monkeypatch.setattr(base_module, "err_console", err_console)
    monkeypatch.setattr(pods_module, "console", console)
    monkeypatch.setattr(pods_module, "err_console", err_console)
    monkeypatch.setattr(status_module, "console", console)
    monkeypatch.setattr(main_module, "console", console)
    monkeypatch.setattr(main_module, "err_console", err_console)


@pytest.fixture(autouse=True)
def isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep file logging from the CLI callback inside the test's tmp dir."""
    monkeypatch.setattr(logging_config, "LOG_DIR", tmp_path / "logs")


@pytest.fixture(autouse=True)
def restore_root_handlers() -> Generator[None]:
    """Drop handlers installed by the CLI callback after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    root.handlers = original_handlers


@pytest.fixture
def mock_resolver() -> MagicMock:
    """Create a mock PodResolver whose accessor defaults to namespace "default".

    Used as a context manager it yields itself, like the real resolver.
    """
    resolver = MagicMock(spec=PodResolver)
    resolver.__enter__.return_value = resolver
    resolver.__exit__.return_value = False
    resolver.accessor = MagicMock()
    resolver.accessor.default_namespace = "default"
    return resolver


@pytest.fixture
def get_resolver(mock_resolver: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock PodResolver."""
    return lambda: mock_resolver
