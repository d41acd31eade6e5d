"""Structured JSON logging with payload sanitization.

Log records are emitted as JSON lines carrying the service name, environment
and the current request id. Generated images travel through the service as
base64 data URIs; the sanitizer truncates them so a single log line never
carries a megabyte of image payload, and it redacts credentials.
"""

import logging
import re
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger.json import JsonFormatter

from .config import settings

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
session_id_var: ContextVar[Optional[str]] = ContextVar('session_id', default=None)

DATA_URI_PREVIEW_CHARS = 48


class SecuritySanitizer:
    """Redact secrets and shorten inline image payloads."""

    SENSITIVE_PATTERNS = {
        'api_key': re.compile(r'(api[_-]?key["\s:=]+["\']?)([a-zA-Z0-9_-]{20,})', re.IGNORECASE),
        'bearer_token': re.compile(r'(bearer\s+)([a-zA-Z0-9_.-]{20,})', re.IGNORECASE),
        'openrouter_key': re.compile(r'()(sk-or-[a-zA-Z0-9_-]{10,})'),
    }
    DATA_URI_PATTERN = re.compile(r'(data:[\w.+-]+/[\w.+-]+;base64,)([A-Za-z0-9+/=]+)')

    @classmethod
    def truncate_data_uris(cls, text: str) -> str:
        def _shorten(match: re.Match) -> str:
            payload = match.group(2)
            if len(payload) <= DATA_URI_PREVIEW_CHARS:
                return match.group(0)
            return f"{match.group(1)}{payload[:DATA_URI_PREVIEW_CHARS]}...[{len(payload)} chars]"

        return cls.DATA_URI_PATTERN.sub(_shorten, text)

    @classmethod
    def sanitize_string(cls, text: str) -> str:
        """Sanitize a string by redacting secrets and truncating data URIs."""
        if not isinstance(text, str):
            return str(text)

        sanitized = cls.truncate_data_uris(text)
        for pattern in cls.SENSITIVE_PATTERNS.values():
            sanitized = pattern.sub(r'\1***REDACTED***', sanitized)
        return sanitized

    @classmethod
    def sanitize_dict(cls, data: Dict[str, Any], max_depth: int = 3) -> Dict[str, Any]:
        """Recursively sanitize a dictionary."""
        if max_depth <= 0:
            return {"...": "max_depth_reached"}

        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            key_lower = key.lower()
            if any(sensitive in key_lower for sensitive in ['password', 'secret', 'token', 'api_key', 'authorization']):
                sanitized[key] = "***REDACTED***"
            elif isinstance(value, dict):
                sanitized[key] = cls.sanitize_dict(value, max_depth - 1)
            elif isinstance(value, list):
                sanitized[key] = cls.sanitize_list(value, max_depth - 1)
            elif isinstance(value, str):
                sanitized[key] = cls.sanitize_string(value)
            else:
                sanitized[key] = value
        return sanitized

    @classmethod
    def sanitize_list(cls, data: List[Any], max_depth: int = 3) -> List[Any]:
        """Sanitize a list by sanitizing its elements."""
        if max_depth <= 0:
            return ["...max_depth_reached"]

        sanitized: List[Any] = []
        for item in data[:10]:  # Limit list length in logs
            if isinstance(item, dict):
                sanitized.append(cls.sanitize_dict(item, max_depth - 1))
            elif isinstance(item, list):
                sanitized.append(cls.sanitize_list(item, max_depth - 1))
            elif isinstance(item, str):
                sanitized.append(cls.sanitize_string(item))
            else:
                sanitized.append(item)

        if len(data) > 10:
            sanitized.append(f"...and {len(data) - 10} more items")
        return sanitized


_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname', 'levelno',
    'lineno', 'module', 'msecs', 'message', 'pathname', 'process', 'processName',
    'relativeCreated', 'thread', 'threadName', 'exc_info', 'exc_text', 'stack_info',
    'taskName',
}


class StructuredFormatter(JsonFormatter):
    """JSON formatter adding service context and sanitizing extras."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = settings.service_name
        log_record['environment'] = settings.service_env
        if 'message' in log_record and isinstance(log_record['message'], str):
            log_record['message'] = SecuritySanitizer.sanitize_string(log_record['message'])

        if request_id := request_id_var.get():
            log_record['request_id'] = request_id
        if session_id := session_id_var.get():
            log_record['session_id'] = session_id

        if record.exc_info and record.exc_info[0] is not None:
            exception_info = {
                'type': record.exc_info[0].__name__,
                'message': SecuritySanitizer.sanitize_string(str(record.exc_info[1])),
            }
            # Tracebacks stay out of production logs
            if not settings.is_production:
                exception_info['traceback'] = traceback.format_exception(*record.exc_info)
            log_record['exception'] = exception_info
            log_record.pop('exc_info', None)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith('_'):
                continue
            if isinstance(value, dict):
                log_record[key] = SecuritySanitizer.sanitize_dict(value)
            elif isinstance(value, list):
                log_record[key] = SecuritySanitizer.sanitize_list(value)
            elif isinstance(value, str):
                log_record[key] = SecuritySanitizer.sanitize_string(value)
            else:
                log_record[key] = value


def setup_logging(level: str = "INFO") -> None:
    """Install the JSON handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(getattr(handler, "formatter", None), StructuredFormatter):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter('%(timestamp)s %(level)s %(name)s %(message)s'))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


class StructuredLogger:
    """Thin wrapper turning keyword arguments into structured extras."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        self.logger.log(level, message, extra=SecuritySanitizer.sanitize_dict(kwargs), exc_info=exc_info)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def exception(self, message: str, **kwargs):
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


class LoggerFactory:
    """Factory for creating structured loggers."""

    _loggers: Dict[str, StructuredLogger] = {}

    @classmethod
    def get_logger(cls, name: str) -> StructuredLogger:
        if name not in cls._loggers:
            cls._loggers[name] = StructuredLogger(name)
        return cls._loggers[name]


def log_external_call(logger: StructuredLogger, service: str, operation: str, **kwargs):
    """Log external service call."""
    logger.info(
        f"External call to {service}: {operation}",
        external_service=service,
        operation=operation,
        event_type="external_call",
        **kwargs
    )


def log_business_event(logger: StructuredLogger, event: str, **kwargs):
    """Log business domain event."""
    logger.info(
        f"Business event: {event}",
        business_event=event,
        event_type="business",
        **kwargs
    )
