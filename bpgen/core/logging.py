"""
Structured logging configuration for bpgen.

Uses structlog on top of the standard library logger and a rich console
handler. A generation run is usually invoked from a build script, so JSON lines
are emitted whenever stderr is not a terminal (or when explicitly requested)
and key/value output otherwise.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config


def _build_processors(json_output: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if json_output:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    else:
        # RichHandler colours the level and time columns
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def setup_logging(config: Config | None = None, json_output: bool | None = None) -> None:
    """Configure structured logging for a generation run.

    Args:
        config: Optional configuration. If None, uses INFO level.
        json_output: Force JSON (True) or console (False) rendering. When None,
            JSON is used if stderr is not a TTY.
    """
    log_level = config.log_level if config else "INFO"
    level = getattr(logging, log_level, logging.INFO)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=log_level == "DEBUG",
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])

    if json_output is None:
        json_output = not sys.stderr.isatty()

    structlog.configure(
        processors=_build_processors(json_output),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured bound logger
    """
    return structlog.get_logger(name)


@contextmanager
def run_context(**kwargs: object) -> Iterator[None]:
    """Bind run-wide fields (project, target SDK, ...) to every log entry.

    The fields are removed again when the block exits, so consecutive runs in
    one process do not leak context into each other.
    """
    with structlog.contextvars.bound_contextvars(**kwargs):
        yield
