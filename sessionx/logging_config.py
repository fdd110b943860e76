"""
Logging configuration: health check suppression and session cookie masking
"""

import logging
import logging.config
import re
from typing import Any, Dict


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out health check requests from uvicorn access logs."""
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "/health" in message and "GET" in message:
                return False
        return True


class SessionCookieFilter(logging.Filter):
    """Mask session cookie values that end up in log messages."""

    def __init__(self, cookie_name: str = "sessionx"):
        super().__init__()
        self.pattern = re.compile(rf"({re.escape(cookie_name)}=)[A-Za-z0-9_\-]+")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.pattern.sub(r"\1***", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def get_logging_config(level: str = "INFO", cookie_name: str = "sessionx") -> Dict[str, Any]:
    """Get logging configuration with health check suppression and cookie masking."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter
            },
            "session_cookie_filter": {
                "()": SessionCookieFilter,
                "cookie_name": cookie_name,
            },
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["session_cookie_filter"],
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter", "session_cookie_filter"],
            }
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": level,
                "propagate": False
            },
            "sessionx": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }
