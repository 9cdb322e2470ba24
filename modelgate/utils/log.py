"""Logging utilities for modelgate.

Records carry their context in ``extra=`` fields, which the formatter
appends as JSON. Fields whose names mark them as credentials are masked
before they reach any handler.
"""

import json
import logging
import os
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


LOG_LEVEL_ENV = "MODELGATE_LOG_LEVEL"
REDACTED = "***"

_LOG_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

_SECRET_FIELD_PATTERN = re.compile(r"(api_?key|secret|token|password|authorization)", re.IGNORECASE)


def redact_extras(extras: Dict[str, Any]) -> Dict[str, Any]:
    """Mask values of fields that look like credentials."""
    return {
        key: (REDACTED if value and _SECRET_FIELD_PATTERN.search(key) else value)
        for key, value in extras.items()
    }


class StructuredFormatter(logging.Formatter):
    """Formatter with UTC ISO timestamps and redacted JSON context."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return timestamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _LOG_RECORD_FIELDS and not key.startswith("_")
        }
        if not extras:
            return message
        try:
            serialized = json.dumps(redact_extras(extras), sort_keys=True, default=str)
        except (TypeError, ValueError):
            serialized = str(redact_extras(extras))
        return f"{message} | {serialized}"


class ModelgateLogger:
    """Process-wide logger: stderr at the configured level, optional debug file."""

    def __init__(self, name: str = "modelgate", log_dir: Optional[Path] = None):
        self.logger = logging.getLogger(name)
        level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        if not self.logger.handlers:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(getattr(logging, level_name, logging.WARNING))
            console_handler.setFormatter(StructuredFormatter("%(levelname)s: %(message)s"))
            self.logger.addHandler(console_handler)

        self._file_handler: Optional[logging.Handler] = None
        if log_dir:
            self.attach_file_handler(
                Path(log_dir) / f"modelgate_{datetime.now().strftime('%Y%m%d')}.log"
            )

    @property
    def log_file(self) -> Optional[Path]:
        if isinstance(self._file_handler, logging.FileHandler):
            return Path(self._file_handler.baseFilename)
        return None

    def attach_file_handler(self, log_file: Path) -> Path:
        """Mirror every record, DEBUG included, to ``log_file``."""
        log_file = Path(log_file)
        if self.log_file == log_file.resolve():
            return log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        self.detach_file_handler()

        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))
        self.logger.addHandler(handler)
        self._file_handler = handler
        return log_file

    def detach_file_handler(self) -> None:
        if self._file_handler is not None:
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(message, *args, **kwargs)


_logger: Optional[ModelgateLogger] = None


def get_logger() -> ModelgateLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = ModelgateLogger()
    return _logger


def init_logger(log_dir: Optional[Path] = None) -> ModelgateLogger:
    """Attach a daily log file under ``log_dir`` to the global logger."""
    logger = get_logger()
    if log_dir:
        logger.attach_file_handler(
            Path(log_dir) / f"modelgate_{datetime.now().strftime('%Y%m%d')}.log"
        )
    return logger
