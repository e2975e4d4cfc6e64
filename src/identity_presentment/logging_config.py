"""Logging setup for presentment verification, driven by PresentmentSettings."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime

from opentelemetry import trace

from .config import LOG_LEVELS, LOG_OFF_LEVEL, PresentmentSettings

TEXT_LOG_FORMAT = (
    "%(asctime)s - %(levelname)s - [%(service_name)s] - [%(name)s] - "
    "[%(module)s.%(funcName)s:%(lineno)d] - %(message)s"
)

# Record attributes copied into JSON entries when present
_OPTIONAL_JSON_FIELDS = ("trace_id", "span_id", "error_code")


class ServiceNameFilter(logging.Filter):
    """Stamps the verifier's service name on every record."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service_name = self.service_name
        return True


class TraceContextFilter(logging.Filter):
    """Adds the active OpenTelemetry trace and span ids, or None outside a span."""

    def filter(self, record: logging.LogRecord) -> bool:
        span = trace.get_current_span()
        if span.is_recording():
            context = span.get_span_context()
            record.trace_id = format(context.trace_id, "032x")
            record.span_id = format(context.span_id, "016x")
        else:
            record.trace_id = record.span_id = None
        return True


class PresentmentJSONFormatter(logging.Formatter):
    """One JSON object per record, carrying error codes of rejected presentments."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "service": getattr(record, "service_name", "unknown"),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _OPTIONAL_JSON_FIELDS:
            value = getattr(record, name, None)
            if value:
                entry[name] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def build_formatter(log_format: str) -> logging.Formatter:
    """
    Resolve a log_format setting

    "json" and "text" select the built-in formats; any other value is used
    as a logging format string.
    """
    if log_format.lower() == "json":
        return PresentmentJSONFormatter()
    if log_format.lower() == "text":
        return logging.Formatter(TEXT_LOG_FORMAT)
    return logging.Formatter(log_format)


def setup_logging(
    settings: PresentmentSettings, service_name: str = "identity-presentment"
) -> None:
    """
    Install a stdout handler on the root logger from the verifier settings.

    Args:
        settings: Source of log_level and log_format
        service_name: Name stamped on every record
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    level_name = settings.log_level.upper()
    if level_name == LOG_OFF_LEVEL:
        root_logger.setLevel(logging.CRITICAL + 1)
        return

    root_logger.setLevel(LOG_LEVELS[level_name])

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(settings.log_format))
    handler.addFilter(ServiceNameFilter(service_name))
    handler.addFilter(TraceContextFilter())
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging configured. Service: %s, Level: %s", service_name, level_name
    )
