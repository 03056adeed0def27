"""
Structured logging for the TIL tools.

Logs go to stderr so the CLI can keep stdout for its JSON result.
TIL_LOG_LEVEL picks the level (WARNING by default) and TIL_LOG_FORMAT=json
switches from the console renderer to one JSON object per line.

Each CLI run binds its action name into the context, so every event
emitted while handling that run carries it:

    {"event": "timestamp_unparsable", "action": "stats", "component": "til.timeutil", ...}

Usage:
    from tools.logging_config import setup_logging, get_logger, bind_cli_context
    setup_logging()
    bind_cli_context(action="stats")
    logger = get_logger(__name__)
    logger.info("entry_saved", entry_id="entry-1234")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

PACKAGE_PREFIX = "tools."


def _add_component(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Short component name ("til.repository") from the stdlib logger name."""
    name = event_dict.pop("logger", None) or getattr(logger, "name", None)
    if name and "component" not in event_dict:
        event_dict["component"] = name.removeprefix(PACKAGE_PREFIX)
    return event_dict


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("TIL_LOG_LEVEL") or "WARNING").upper()
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    if json_output is None:
        json_output = os.environ.get("TIL_LOG_FORMAT", "").lower() == "json"

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_component,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))


def bind_cli_context(**values: Any) -> None:
    """Replace the per-run context (action, ids) merged into every event."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**{k: v for k, v in values.items() if v is not None})


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["bind_cli_context", "get_logger", "setup_logging"]
