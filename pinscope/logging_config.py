"""
Logging setup for pinscope.

Log lines go to stdout, plus an optional file, either as plain text or as
one JSON object per line. Scrape and search events attach their numbers
(query, count, duration) as fields so they survive into JSON output.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import Settings, settings as default_settings

TEXT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that are noisy at INFO
QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "asyncio")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with any attached fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class FieldsLogger(logging.Logger):
    """Logger with a helper for attaching structured fields to a record."""

    def info_with(self, msg: str, **fields):
        if self.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, (), extra={"fields": fields})


logging.setLoggerClass(FieldsLogger)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATEFMT)


def setup_logging(config: Optional[Settings] = None) -> logging.Logger:
    """Configure the root logger from `config` (the process settings by default)."""
    config = config or default_settings
    formatter = _make_formatter(config.log_json)

    root = logging.getLogger()
    root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    root.handlers.clear()

    handlers = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> FieldsLogger:
    return logging.getLogger(name)
