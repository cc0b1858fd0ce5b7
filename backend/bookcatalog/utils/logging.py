"""Structured logging configuration"""

import logging
import sys
import uuid
from typing import Optional
import structlog
from pythonjsonlogger import jsonlogger

from ..config import settings


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog to emit one JSON object per event on stdout

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger bound to ``name`` (typically __name__)"""
    return structlog.get_logger(name)


REQUEST_ID_HEADER = "X-Request-ID"


def bind_request_context(request_id: Optional[str], method: str, path: str) -> str:
    """
    Start a fresh logging context for one request

    Every event logged while the request is handled carries the
    request id, method and path. A missing or oversized incoming id is
    replaced by a new one.

    Returns:
        The request id in effect
    """
    if not request_id or len(request_id) > 128:
        request_id = uuid.uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, method=method, path=path)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


class CatalogJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps service and environment on every record"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["service"] = "book-catalog"
        log_record["environment"] = settings.ENVIRONMENT
        log_record["logger_name"] = record.name
        # Same request context structlog events carry
        log_record.update(structlog.contextvars.get_contextvars())

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def configure_uvicorn_logging() -> None:
    """Route uvicorn access/error logs through the JSON formatter"""

    formatter = CatalogJsonFormatter("%(timestamp)s %(levelname)s %(name)s %(message)s", timestamp=True)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    for name in ("uvicorn.access", "uvicorn.error"):
        logging.getLogger(name).handlers = [handler]
