"""Faultline - Logger Configuration.

Loguru-based structured logging configuration:
- Loguru for application logs (pretty format, colors, structured data)
- Intercept handler for third-party library logs (uvicorn, fastapi, redis)
- OpenTelemetry and request context correlation
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

from src.shared.context import get_request_id

if TYPE_CHECKING:
    from src.core.config import Settings

# Default trace/span IDs when no active trace
NO_TRACE = "0" * 32
NO_SPAN = "0" * 16

SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|api_key|credential|authorization|cookie)",
    re.IGNORECASE,
)

EXCLUDED_EXTRA_KEYS = {"trace_id", "span_id", "request_id", "name"}

# Bound by UserFriendlyError.log, grouped under "error" in JSON entries
ERROR_EXTRA_KEYS = {"channel": "channel", "status": "status", "type": "type", "error_name": "name"}


def _get_settings() -> Settings:
    """Get settings lazily to avoid circular imports."""
    from src.core.config import settings

    return settings


class InterceptHandler(logging.Handler):
    """Handler redirecting standard logging records to Loguru.

    uvicorn, fastapi and redis log through the standard logging module;
    this keeps every log line in the same Loguru format.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = str(record.levelno)

        frame = logging.currentframe()
        depth = 2

        if frame:
            while frame.f_code.co_filename == logging.__file__:
                if frame.f_back:
                    frame = frame.f_back
                    depth += 1
                else:
                    break

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _context_patcher(record: dict[str, Any]) -> None:
    """Inject OpenTelemetry trace context and the request ID into every record."""
    from opentelemetry import trace

    span = trace.get_current_span()
    if span == trace.INVALID_SPAN:
        record["extra"].setdefault("trace_id", NO_TRACE)
        record["extra"].setdefault("span_id", NO_SPAN)
    else:
        ctx = span.get_span_context()
        record["extra"]["trace_id"] = trace.format_trace_id(ctx.trace_id)
        record["extra"]["span_id"] = trace.format_span_id(ctx.span_id)

    request_id = get_request_id()
    if request_id:
        record["extra"]["request_id"] = request_id


def _redact_sensitive_value(key: str, value: Any) -> Any:
    if SENSITIVE_PATTERNS.search(key):
        return "***REDACTED***"
    return value


def build_log_entry(record: dict[str, Any], service_name: str) -> dict[str, Any]:
    """Build the structured JSON entry for one Loguru record.

    Args:
        record: Loguru log record
        service_name: Name of the service for log entries

    Returns:
        JSON-serializable log entry
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["extra"].get("name", record["name"]),
        "function": record["function"],
        "line": record["line"],
        "trace_id": record["extra"].get("trace_id", NO_TRACE),
        "span_id": record["extra"].get("span_id", NO_SPAN),
        "service": service_name,
    }

    if "request_id" in record["extra"]:
        log_entry["request_id"] = record["extra"]["request_id"]

    if "error_name" in record["extra"]:
        log_entry["error"] = {
            field: record["extra"].get(key) for key, field in ERROR_EXTRA_KEYS.items()
        }

    for key, value in record["extra"].items():
        if key in EXCLUDED_EXTRA_KEYS or ("error" in log_entry and key in ERROR_EXTRA_KEYS):
            continue
        log_entry[key] = _redact_sensitive_value(key, value)

    if record.get("exception"):
        exc = record["exception"]
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return log_entry


def _create_json_sink(service_name: str) -> Any:
    """Create a JSON sink writing to stdout."""

    def json_sink(message: Any) -> None:
        log_entry = build_log_entry(message.record, service_name)
        sys.stdout.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
        sys.stdout.flush()

    return json_sink


def setup_logger() -> None:
    """Configure Loguru logger.

    Sets up:
    - Console handler with colored output (dev) or JSON format (prod)
    - Trace and request correlation
    - Third-party library log interception
    """
    settings = _get_settings()

    logger.remove()
    logger.configure(patcher=_context_patcher)

    is_prod = settings.logging.format.lower() == "json"

    if is_prod:
        logger.add(
            _create_json_sink(settings.app.name),
            level=settings.logging.level.upper(),
            backtrace=True,
            diagnose=False,  # never expose locals in production
            enqueue=True,
        )
    else:
        dev_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> | "
            "<dim>trace_id={extra[trace_id]}</dim>"
        )
        logger.add(
            sys.stdout,
            format=dev_format,
            level=settings.logging.level.upper(),
            colorize=True,
            backtrace=True,
            diagnose=settings.app.debug,
            enqueue=True,
        )

    configure_third_party_loggers()

    logger.info(
        "Logger configured",
        level=settings.logging.level,
        format="json" if is_prod else "console",
    )


def configure_third_party_loggers() -> None:
    """Route uvicorn, fastapi and redis logs through Loguru."""
    settings = _get_settings()
    is_prod = settings.logging.format.lower() == "json"

    logging.root.handlers = []
    logging.root.setLevel(logging.INFO)

    loggers_to_configure = [
        "",  # root logger
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "fastapi",
        "redis",
    ]

    for logger_name in loggers_to_configure:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers.clear()
        logging_logger.addHandler(InterceptHandler())
        logging_logger.propagate = False

        if logger_name == "uvicorn.access":
            logging_logger.setLevel(logging.WARNING if is_prod else logging.INFO)
        elif logger_name == "redis":
            logging_logger.setLevel(logging.WARNING)
        else:
            logging_logger.setLevel(logging.INFO)

    logger.debug("Third-party loggers configured")


def get_logger(name: str):
    """Get a logger bound to ``name`` (usually ``__name__``)."""
    return logger.bind(name=name)
