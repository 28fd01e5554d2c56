"""Structured logging for wpods.

structlog events are rendered by stdlib handlers on the root logger:

- stderr, human-readable (or JSON with ``json_output``), so table/json/yaml
  output on stdout stays clean;
- a rotating JSON file at ``~/.local/state/wpods/wpods.log`` that always
  records DEBUG and above.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog

LOG_DIR = Path.home() / ".local" / "state" / "wpods"
LOG_FILE_NAME = "wpods.log"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3
RETENTION_DAYS = 14

# Set on every handler installed here so reconfiguring removes only ours
_HANDLER_MARKER = "_wpods_handler"

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.INFO if verbose else logging.WARNING


def _install(handler: logging.Handler, renderer: structlog.types.Processor, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_PRE_CHAIN)
    )
    setattr(handler, _HANDLER_MARKER, True)
    logging.getLogger().addHandler(handler)


def _remove_installed_handlers() -> None:
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_MARKER, False)]:
        root.removeHandler(handler)
        handler.close()


def _cleanup_old_logs() -> None:
    """Delete rotated log files untouched for RETENTION_DAYS."""
    if not LOG_DIR.exists():
        return
    cutoff = (datetime.now() - timedelta(days=RETENTION_DAYS)).timestamp()
    for log_file in LOG_DIR.glob(f"{LOG_FILE_NAME}*"):
        try:
            if log_file.stat().st_mtime < cutoff:
                log_file.unlink()
        except OSError:
            continue


def _setup_file_logging() -> None:
    """Add the rotating JSON file handler, unless LOG_DIR cannot be created."""
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
    except OSError:
        # Read-only home (e.g. in a container); stderr logging still works
        return

    _cleanup_old_logs()
    _install(
        RotatingFileHandler(
            LOG_DIR / LOG_FILE_NAME, maxBytes=MAX_LOG_SIZE, backupCount=BACKUP_COUNT
        ),
        structlog.processors.JSONRenderer(),
        logging.DEBUG,
    )


def configure_logging(
    verbose: bool = False,
    debug: bool = False,
    json_output: bool = False,
) -> None:
    """Route structlog through stderr and the log file.

    Safe to call more than once; each call replaces the handlers installed by
    the previous one.

    Args:
        verbose: Show INFO events on stderr.
        debug: Show DEBUG events on stderr, with locals in tracebacks.
        json_output: Render stderr events as JSON lines.
    """
    level = _level(verbose, debug)

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _remove_installed_handlers()
    logging.getLogger().setLevel(logging.DEBUG)

    console: structlog.types.Processor
    if json_output:
        console = structlog.processors.JSONRenderer()
    else:
        console = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=debug),
        )
    _install(logging.StreamHandler(sys.stderr), console, level)
    _setup_file_logging()


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """structlog logger, optionally bound to ``initial_context``."""
    logger: structlog.BoundLogger = structlog.get_logger(name)
    return logger.bind(**initial_context) if initial_context else logger
