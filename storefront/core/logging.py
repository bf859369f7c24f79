"""
Logging configuration
Plain console output for development, JSON lines for production
"""

import datetime
import json
import logging
import logging.config

from .config import settings

class JSONFormatter(logging.Formatter):
    """
    JSON log formatter.
    Recursively scrubs sensitive keys from structured log payloads.
    """

    SENSITIVE_KEYS = {
        'password', 'token', 'access_token', 'authorization',
        'secret', 'card_number', 'cvv', 'signature'
    }

    def _scrub(self, data):
        if isinstance(data, dict):
            return {
                k: '***REDACTED***' if str(k).lower() in self.SENSITIVE_KEYS else self._scrub(v)
                for k, v in data.items()
            }
        if isinstance(data, list):
            return [self._scrub(i) for i in data]
        return data

    def format(self, record):
        if isinstance(record.msg, dict):
            record.msg = self._scrub(record.msg)

        log_record = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "lvl": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "line": record.lineno,
        }

        # Request / order context passed through `extra=`
        for key in ("request_id", "order_id", "order_number", "user_id"):
            if hasattr(record, key):
                log_record[key] = str(getattr(record, key))

        if record.exc_info:
            log_record['exc'] = self.formatException(record.exc_info)

        return json.dumps(log_record)

def setup_logging() -> None:
    """Configure root logging from settings"""
    formatter = "json" if settings.LOG_FORMAT == "json" else "plain"

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": settings.LOG_LEVEL,
        },
        "loggers": {
            "sqlalchemy.engine": {
                "level": "INFO" if settings.DATABASE_ECHO else "WARNING",
            },
        },
    })
