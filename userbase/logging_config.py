"""Logging configuration.

Usage:
    from userbase.logging_config import setup_logging

    # In main.py
    setup_logging(log_level="INFO")

    # In any module
    logger = logging.getLogger(__name__)
    logger.info("User updated", extra={"context": {"user_id": user_id}})
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Union


class JSONFormatter(logging.Formatter):
    """Outputs records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "context"):
            log_data["context"] = getattr(record, "context", {})

        return json.dumps(log_data, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter that appends the ``context`` extra, if any."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if context:
            message = f"{message} | {json.dumps(context, default=str)}"
        return message


def setup_logging(log_level: Union[int, str] = "INFO", use_json_format: bool = False) -> None:
    """Configure the root logger with a single stdout handler.

    Args:
        log_level: Logging level (int like logging.INFO or string "INFO")
        use_json_format: Use JSON format instead of console format
    """
    if isinstance(log_level, int):
        level = log_level
    else:
        level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if use_json_format:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ConsoleFormatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )

    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
