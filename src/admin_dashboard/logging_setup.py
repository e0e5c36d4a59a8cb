# src/admin_dashboard/logging_setup.py

import logging
import re
from typing import Optional

_BEARER_RE = re.compile(r"(Bearer\s+)[^\s\"',]+")
_TOKEN_FIELD_RE = re.compile(r"((?:access|refresh)_token['\"]?\s*[:=]\s*['\"]?)[^\s\"',}]+")


def redact(text: str) -> str:
    """Mask bearer credentials and token fields in a log line."""
    text = _BEARER_RE.sub(r"\1***", text)
    return _TOKEN_FIELD_RE.sub(r"\1***", text)


class DashboardLogFormatter(logging.Formatter):
    """One key=value line per record, with credentials masked."""

    def format(self, record: logging.LogRecord) -> str:
        fields = [
            ("time", self.formatTime(record, self.datefmt)),
            ("level", record.levelname),
            ("logger", record.name),
            ("message", redact(record.getMessage())),
        ]
        if record.exc_info:
            fields.append(("exc_info", redact(self.formatException(record.exc_info))))
        return " ".join(f"{key}={value}" for key, value in fields)


def configure_logging(level: Optional[str] = None) -> None:
    if level is None:
        from .config import settings
        level = settings.LOG_LEVEL
    logging.basicConfig(level=level.upper(), format="%(message)s")
    for handler in logging.getLogger().handlers:
        handler.setFormatter(DashboardLogFormatter())
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
