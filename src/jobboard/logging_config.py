# logging_config.py
import json
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict

# Get the project root directory
project_root = Path(__file__).parent.parent.parent


class SensitiveDataFilter(logging.Filter):
    """Filter to remove sensitive data from log records."""

    def __init__(self, sensitive_keys=None):
        super().__init__()
        self.sensitive_keys = sensitive_keys or ['password', 'token', 'api_key', 'secret']

    def filter(self, record):
        for key in self.sensitive_keys:
            if hasattr(record, key):
                setattr(record, key, '****REDACTED****')
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            record.extra = {
                k: ('****REDACTED****' if k in self.sensitive_keys else v)
                for k, v in extra.items()
            }
        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        # Add extra fields if present
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            log_data.update(record.extra)

        return json.dumps(log_data, default=str)


def setup_logging(name: str, level: str = None) -> logging.Logger:
    """Set up logging configuration for a service entry point."""
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_dir = os.getenv("LOG_DIR", str(project_root / "logs"))
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers = []

    formatter = JSONFormatter()
    redactor = SensitiveDataFilter()

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, f"{name}.log"),
        maxBytes=10485760,  # 10MB
        backupCount=5
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(redactor)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(redactor)
    logger.addHandler(console_handler)

    if log_level == "DEBUG":
        logger.debug("Debug logging enabled")

    return logger


def log_structured(logger, level, message, data=None, **kwargs):
    """Log a message with structured data attached under ``extra``."""
    payload: Dict[str, Any] = {}
    if isinstance(data, dict):
        payload.update(data)
    elif data is not None:
        payload["data"] = data
    payload.update(kwargs)

    log = getattr(logger, level, None)
    if log is None:
        raise ValueError(f"Unknown log level: {level}")
    log(message, extra={"extra": payload})
