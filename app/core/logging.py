import logging
import sys
from contextvars import ContextVar
from typing import Any, Final
from collections.abc import Mapping, MutableMapping
from logging import LoggerAdapter, LogRecord
from typing_extensions import override
from fastapi import Request

_LOG_FORMAT: Final[str] = (
    "%(asctime)s %(levelname)s %(name)s :: %(message)s [req=%(request_id)s]"
)

# Set by CorrelationIdMiddleware for the duration of a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class RequestLogFilter(logging.Filter):
    """
    Ensures every record has a request_id key.
    """

    @override
    def filter(self, record: LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Configure root/uvicorn loggers (request_id).
    """
    if isinstance(level, str):
        level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestLogFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.setLevel(level)
        lg.addHandler(handler)
        lg.propagate = False

class RequestLoggerAdapter(LoggerAdapter[logging.Logger]):
    """
    Adds request context to records, keeping any `extra` passed per call.
    """

    @override
    def process(
        self, msg: object, kwargs: MutableMapping[str, Any]
    ) -> tuple[object, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str,
    request: Request | None = None
) -> RequestLoggerAdapter:
    """
    Attach request context (request_id).
    Usage: logger = get_logger(__name__, request)
    """
    extra: Mapping[str, str] = {}
    if request is not None:
        extra = {"request_id": getattr(request.state, "correlation_id", "-")}
    return RequestLoggerAdapter(logging.getLogger(name), extra)
