import json
import logging
import logging.config
import sys
from typing import Optional

# Loggers that must not propagate to root, or uvicorn would print twice.
_APP_LOGGERS = ("bingoo", "uvicorn.error")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers (CloudWatch on Lambda)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logging_config(
    log_level: str = "INFO", json_logs: bool = False, log_file: Optional[str] = None
) -> dict:
    level = log_level.upper()
    handlers = {
        "stdout": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "json" if json_logs else "line",
        },
        "stderr": {
            "class": "logging.StreamHandler",
            "stream": sys.stderr,
            "formatter": "json" if json_logs else "trace",
            "level": "WARNING",
        },
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
            "formatter": "json",
        }
    app_handlers = list(handlers)

    loggers = {
        name: {"handlers": app_handlers, "level": level, "propagate": False}
        for name in _APP_LOGGERS
    }
    loggers["uvicorn.access"] = {"handlers": ["stdout"], "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "line": {"format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s"},
            "trace": {
                "format": "%(asctime)s %(levelname)-7s %(name)s (%(filename)s:%(lineno)d)\n%(message)s"
            },
            "json": {"()": JsonFormatter},
        },
        "handlers": handlers,
        "root": {"handlers": app_handlers, "level": level},
        "loggers": loggers,
    }


def setup_logging(
    log_level: str = "INFO", json_logs: bool = False, log_file: Optional[str] = None
):
    logging.config.dictConfig(build_logging_config(log_level, json_logs, log_file))
