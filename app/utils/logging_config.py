"""
Structured Logging Configuration

Provides JSON-formatted logging with:
- Request ID tracking
- Quote context (product, contract, channel)
- Structured output for log aggregation
"""

import logging
import json
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Any, Dict
from contextvars import ContextVar

# Context variable for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')


# Quote fields promoted out of "data" so aggregators can filter on them
QUOTE_FIELDS = ("contract_id", "channel", "nights", "kind")

# Record attributes copied as-is when a call sets them
RECORD_FIELDS = ("duration_ms", "entity_type", "entity_id")


class JSONFormatter(logging.Formatter):
    """One JSON object per line; quote context is lifted to the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for name in RECORD_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        data = dict(getattr(record, "extra_data", {}))
        for name in QUOTE_FIELDS:
            if name in data:
                log_data[name] = data.pop(name)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that adds structured context to log messages.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs

    def log_with_context(
        self,
        level: int,
        msg: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        duration_ms: Optional[float] = None,
        stacklevel: int = 2,
        **extra_data
    ):
        """
        Log with additional structured context.

        stacklevel points the record location at the caller; helpers that
        wrap this method pass 3 so the location is their own caller.
        """
        extra = {}
        if entity_type:
            extra['entity_type'] = entity_type
        if entity_id:
            extra['entity_id'] = entity_id
        if duration_ms is not None:
            extra['duration_ms'] = duration_ms
        if extra_data:
            extra['extra_data'] = extra_data

        self.log(level, msg, extra=extra, stacklevel=stacklevel)

    def quote_priced(
        self,
        product_id: str,
        contract_id: str,
        channel: str,
        nights: int,
        total_due_now: Decimal,
        duration_ms: float = None
    ):
        self.log_with_context(
            logging.INFO,
            f"Stay priced: {nights} nights, {channel}",
            stacklevel=3,
            entity_type="product",
            entity_id=product_id,
            duration_ms=duration_ms,
            contract_id=contract_id,
            channel=channel,
            nights=nights,
            total_due_now=str(total_due_now)
        )

    def quote_not_bookable(self, product_id: str, contract_id: str, nights: int):
        self.log_with_context(
            logging.INFO,
            "Stay not bookable: uncovered nights",
            stacklevel=3,
            entity_type="product",
            entity_id=product_id,
            contract_id=contract_id,
            nights=nights
        )

    def quote_rejected(self, product_id: str, contract_id: str, kind: str, reason: str):
        self.log_with_context(
            logging.WARNING,
            f"Quote rejected: {kind}",
            stacklevel=3,
            entity_type="product",
            entity_id=product_id,
            contract_id=contract_id,
            kind=kind,
            reason=reason
        )

    def api_request(self, method: str, path: str, status_code: int, duration_ms: float):
        """Log API request with performance data."""
        self.log_with_context(
            logging.INFO,
            f"{method} {path} - {status_code}",
            stacklevel=3,
            duration_ms=duration_ms,
            method=method,
            path=path,
            status_code=status_code
        )


# Loggers that would otherwise print through their own handlers
SERVER_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")

# Third-party loggers kept at WARNING regardless of LOG_LEVEL
QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration")


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure the root logger once at startup.

    JSON lines go to stdout when json_format is set (LOG_JSON), otherwise a
    plain text format for local runs. Uvicorn loggers share the same handler.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)-7s [%(name)s] %(message)s'
        ))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for the given module."""
    return StructuredLogger(logging.getLogger(name), {})


def set_request_context(request_id: str):
    """Set context for the current request."""
    request_id_var.set(request_id)


def clear_request_context():
    """Clear request context."""
    request_id_var.set('')
