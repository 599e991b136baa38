"""
Uphaar Backend: Logging Setup
=============================

What:  Root logger configuration and the per-request correlation id.
Who:   setup_logging() is called once at startup by both host bindings;
       request_id_var is set by the server middleware and the serverless
       handler, and read by the Dispatcher and access log.
"""

import logging
import sys
import uuid
from contextvars import ContextVar

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

access_logger = logging.getLogger("uphaar.access")


def new_request_id() -> str:
    """Short uuid prefix; 8 chars is enough for correlating log lines."""
    return str(uuid.uuid4())[:8]


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, on stdout.
    Third-party libraries that log every operation are capped at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def status_log_level(status: int) -> int:
    """Access-log level for a response status: ERROR 5xx, WARNING 4xx, INFO otherwise."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def log_access(
    method: str,
    path: str,
    status: int,
    duration_ms: float,
    client_ip: str = "unknown",
) -> None:
    """
    Write the access-log line shared by both host bindings.

    Bodies and headers are never passed in, so tokens and PII cannot reach it.
    """
    rid = request_id_var.get("")
    access_logger.log(
        status_log_level(status),
        "%s %s %d %.1fms [%s] from %s",
        method,
        path,
        status,
        duration_ms,
        rid,
        client_ip,
        extra={
            "request_id": rid,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        },
    )
