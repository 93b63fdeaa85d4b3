"""
Structured logging for compressed-shell.

Built on structlog with:
- Human-readable console output by default, JSON when LOG_JSON is set
- Request ID and tool context tracking
- Sensitive data filtering
- Optional append-only debug log file

Everything is written to stderr: stdout belongs to the protocol adapter
that hosts the shell tools.

Usage:
    from compressed_shell.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("permission_denied", command=command, prefix=prefix)
"""

import logging
import os
import sys
from contextvars import ContextVar

import structlog
from structlog.types import FilteringBoundLogger

# Context variables for request tracking
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
tool_name_var: ContextVar[str | None] = ContextVar("tool_name", default=None)


SENSITIVE_KEYS = {
    "password",
    "api_key",
    "secret",
    "authorization",
    "apikey",
    "access_token",
    "refresh_token",
}


def filter_sensitive_data(
    logger: FilteringBoundLogger, method_name: str, event_dict: dict
) -> dict:
    """Filter out sensitive information from logs."""
    for key in list(event_dict.keys()):
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            event_dict[key] = "***REDACTED***"
    return event_dict


def add_context(
    logger: FilteringBoundLogger, method_name: str, event_dict: dict
) -> dict:
    """Add request tracking context to log entries."""
    if request_id := request_id_var.get():
        event_dict["request_id"] = request_id
    if tool_name := tool_name_var.get():
        event_dict["tool_name"] = tool_name
    return event_dict


def configure_logging(
    log_level: str = "INFO", json_logs: bool = False, log_file: str | None = None
) -> None:
    """
    Configure structlog with appropriate processors and renderers.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON logs
        log_file: Optional file path that log lines are appended to
    """
    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    json_logs = os.getenv("LOG_JSON", str(json_logs)).lower() in ("true", "1", "yes")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.INFO),
    )
    logging.getLogger().setLevel(getattr(logging, log_level, logging.INFO))

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError:
            # Unwritable debug log: stderr only.
            logging.getLogger(__name__).warning(
                "debug log file %s is not writable", log_file
            )
        else:
            file_handler.setLevel(getattr(logging, log_level, logging.INFO))
            logging.getLogger().addHandler(file_handler)

    processors = [
        structlog.contextvars.merge_contextvars,
        add_context,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "compressed_shell") -> FilteringBoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def set_request_context(
    request_id: str | None = None,
    tool_name: str | None = None,
) -> None:
    """
    Set request context for logging.

    The context is included in every log entry emitted from the same
    async task or thread.
    """
    if request_id:
        request_id_var.set(request_id)
    if tool_name:
        tool_name_var.set(tool_name)


def clear_request_context() -> None:
    """Clear request context."""
    request_id_var.set(None)
    tool_name_var.set(None)


configure_logging()

logger = get_logger("compressed_shell")


__all__ = [
    "get_logger",
    "configure_logging",
    "set_request_context",
    "clear_request_context",
    "logger",
]
