"""
Logging setup for the API process.

JSON lines in production, human-readable lines in development.
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger


class JobBoardJsonFormatter(jsonlogger.JsonFormatter):
    """Adds the standard fields every log line carries."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        if record.levelno >= logging.WARNING:
            log_record["line"] = record.lineno


def setup_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        formatter: logging.Formatter = JobBoardJsonFormatter("%(timestamp)s %(level)s %(logger)s %(message)s")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # uvicorn's access log duplicates what the handlers already report
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
