"""
Shared module - cross-cutting concerns.

- Context variables for request/trace IDs
- Logging with Loguru
- Canonical errors and their transport adapters (``src.shared.errors``)
"""

from .context import (
    bind_request_context,
    get_request_id,
    get_trace_id,
    request_id_var,
    reset_request_context,
    trace_id_var,
)
from .logging import get_logger, logger, setup_logger

__all__ = [
    # Context
    "bind_request_context",
    "get_request_id",
    "get_trace_id",
    "request_id_var",
    "reset_request_context",
    "trace_id_var",
    # Logging
    "logger",
    "setup_logger",
    "get_logger",
]
