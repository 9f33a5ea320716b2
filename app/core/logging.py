"""
Logging setup for the feedback service.

Production output is JSON (python-json-logger); DEBUG uses a plain format.
Every record passes through ``RedactingFilter`` before it is written so that
credentials, tokens and submission text never reach the log stream.
"""

import logging
import re
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from app.core.config import settings

HANDLER_NAME = "feedback-service"
REDACTED = "[REDACTED]"

# Record attributes (usually passed through ``extra=``) that are never logged
SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "current_password",
        "new_password",
        "hashed_password",
        "token",
        "access_token",
        "authorization",
        "suggestion_text",
        "reply",
    }
)

_BEARER_RE = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9\-_.~+/]+=*")
_JWT_RE = re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "passlib": logging.ERROR,
    "sqlalchemy.engine": logging.WARNING,
}


def redact_text(text: str) -> str:
    """Mask bearer credentials and bare JWTs inside free text."""
    text = _BEARER_RE.sub(f"Bearer {REDACTED}", text)
    return _JWT_RE.sub(REDACTED, text)


def _redact_value(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_FIELDS:
        return REDACTED
    if isinstance(value, dict):
        return {k: _redact_value(str(k), v) for k, v in value.items()}
    return value


class RedactingFilter(logging.Filter):
    """Scrub sensitive extras and token-looking text from a record in place."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(record.__dict__.items()):
            redacted = _redact_value(key, value)
            if redacted is not value:
                setattr(record, key, redacted)

        if isinstance(record.msg, str):
            if record.args:
                record.msg = record.getMessage()
                record.args = None
            record.msg = redact_text(record.msg)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.PROJECT_NAME
        log_record["version"] = settings.VERSION
        log_record["level"] = record.levelname


def build_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)

    if settings.DEBUG:
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    handler.addFilter(RedactingFilter())
    return handler


def setup_logging() -> None:
    """
    Install the service handler on the root logger.

    Safe to call more than once: a handler installed by an earlier call is
    replaced rather than duplicated.
    """
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            root_logger.removeHandler(existing)
            existing.close()

    root_logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    root_logger.addHandler(build_handler())

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (pass ``__name__``)."""
    return logging.getLogger(name)
