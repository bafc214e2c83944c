"""Structured logging configuration using structlog.

The CLI drives this from the ``logging`` section of the configuration:

    logging:
      level: INFO
      format: json          # or "console"
      file: logs/firespect.log
      quiet_loggers: [httpx, httpcore, openai]
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from structlog.types import EventDict, Processor

APP_NAME = "firespect"

# Third-party loggers that are chatty at INFO; held at WARNING
DEFAULT_QUIET_LOGGERS = ("httpx", "httpcore", "openai")

_FILE_HANDLER_MARKER = "_firespect_file_handler"
_STREAM_HANDLER_MARKER = "_firespect_stream_handler"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every entry with the application name and version."""
    from .. import __version__

    event_dict.setdefault("app", APP_NAME)
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(log_format: str) -> list[Processor]:
    if log_format == "console":
        return [
            structlog.processors.ExceptionPrettyPrinter(),
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ]


def _replace_file_handler(root: logging.Logger, log_file: str | Path | None, level: int) -> None:
    for handler in list(root.handlers):
        if getattr(handler, _FILE_HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()

    if not log_file:
        return

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _FILE_HANDLER_MARKER, True)
    root.addHandler(handler)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    quiet_loggers: list[str] | tuple[str, ...] = DEFAULT_QUIET_LOGGERS,
) -> None:
    """Setup structured logging with structlog.

    Safe to call repeatedly: the level is reapplied to the root logger and
    any file handler from a previous call is replaced, not duplicated.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "console")
        log_file: Optional log file path
        quiet_loggers: Library loggers held at WARNING or above
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    structlog.configure(
        processors=shared_processors + _renderer(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    if not any(getattr(h, _STREAM_HANDLER_MARKER, False) for h in root.handlers):
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter("%(message)s"))
        setattr(stream_handler, _STREAM_HANDLER_MARKER, True)
        root.addHandler(stream_handler)
    root.setLevel(numeric_level)

    _replace_file_handler(root, log_file, numeric_level)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def setup_logging_from_config(config: dict[str, Any]) -> None:
    """Apply the ``logging`` section of a loaded configuration."""
    section = config.get("logging") or {}
    setup_logging(
        log_level=section.get("level", "INFO"),
        log_format=section.get("format", "json"),
        log_file=section.get("file"),
        quiet_loggers=section.get("quiet_loggers") or DEFAULT_QUIET_LOGGERS,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("transcript_parsed", riser_count=2, source="patterns")
    """
    return structlog.get_logger(name)


# Defaults on import; the CLI reconfigures from config/default.yaml
setup_logging()
