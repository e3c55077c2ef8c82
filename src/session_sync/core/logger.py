"""Structured logging with JSON file output and plain console output."""

import logging
import sys
from pathlib import Path
from datetime import datetime
import json


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    EXTRA_FIELDS = ("session_index", "video_index", "candidate", "status_code", "range")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_dir: Path, log_level: str = "INFO", log_format: str = "json", console: bool = True):
    """Setup logging configuration."""
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    if log_format == "json":
        file_handler = logging.FileHandler(
            log_dir / f"session_sync_{datetime.now().strftime('%Y%m%d')}.jsonl"
        )
        file_handler.setFormatter(JSONFormatter())
    else:
        file_handler = logging.FileHandler(
            log_dir / f"session_sync_{datetime.now().strftime('%Y%m%d')}.log"
        )
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root_logger.addHandler(file_handler)

    # Console stays plain text; only warnings unless verbose
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if log_level.upper() == "DEBUG" else logging.WARNING)
        console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)
