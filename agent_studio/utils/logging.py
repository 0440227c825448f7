"""Structured logging for Agent Studio.

Logs go to stderr so that command output (bundles, fallback reports)
can be piped from stdout. Components log through module loggers bound
with `component=`; `log_operation` brackets whole resolution runs.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _processors(json_format: bool, include_timestamp: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.extend([
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ])

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    include_timestamp: bool = True,
) -> None:
    """Configure structured logging for the CLI.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Render each event as one JSON line
        include_timestamp: Add an ISO timestamp to each event

    Raises:
        ValueError: If the level name is unknown
    """
    level_name = level.upper()
    if level_name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level} (expected one of {', '.join(LOG_LEVELS)})")

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    # basicConfig is a no-op once handlers exist; the level must still follow the latest call
    logging.getLogger().setLevel(getattr(logging, level_name))

    structlog.configure(
        processors=_processors(json_format, include_timestamp),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: Optional[str] = None, **context) -> structlog.BoundLogger:
    """Package logger, bound to a component and any extra context."""
    logger = structlog.get_logger("agent_studio")
    if component is not None:
        context["component"] = component
    return logger.bind(**context) if context else logger


class LogContext:
    """Bind context variables for the duration of a block.

    Usage:
        with LogContext(command="resolve", profile="project.yaml"):
            cli_logger.info("Resolving agents")
            # Every event inside the block carries command and profile
    """

    def __init__(self, **context):
        self.context = context

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        structlog.contextvars.unbind_contextvars(*self.context)


@contextmanager
def log_operation(
    operation: str,
    logger: Optional[structlog.BoundLogger] = None,
    **context,
) -> Iterator[dict[str, Any]]:
    """Log the start, end and duration of an operation.

    Values stored in the yielded dict are attached to the completion
    event. Exceptions are logged and re-raised.

    Example:
        with log_operation("resolve_project_agents", logger=log, domain="saas") as op:
            result = await engine._resolve(profile, "saas")
            op["agent_count"] = len(result.ordered_agents)
    """
    log = (logger or get_logger()).bind(operation=operation, **context)
    log.info(f"{operation} started")

    result: dict[str, Any] = {"success": False, "error": None}
    started = time.perf_counter()
    try:
        yield result
    except Exception as e:
        result["error"] = str(e)
        result["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
        log.error(f"{operation} failed", **result)
        raise

    result["success"] = True
    result["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
    log.info(f"{operation} completed", **result)
