"""
Logging utilities with optional size-based file rotation and redaction of
credentials.

Key Features:
    - Console logging for every module logger
    - Optional rotating log file when LOG_DIR is set (5MB per file)
    - Tokens, passwords, API keys and database credentials are redacted
      before a record reaches any handler
"""

import datetime
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_BASENAME = "city_weather"

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR")

# Log rotation settings
MAX_LOG_SIZE_MB = 5
MAX_LOG_SIZE_BYTES = MAX_LOG_SIZE_MB * 1024 * 1024
MAX_BACKUP_COUNT = 10

_GLOBAL_LOG_FILE: Path | None = None

SENSITIVE_PATTERNS = [
    # Bearer tokens and JWTs
    (re.compile(r"(bearer\s+)([A-Za-z0-9_\-\.]{10,})", re.IGNORECASE), r"\1***REDACTED***"),
    (re.compile(r"(token['\"]?\s*[:=]\s*['\"]?)([A-Za-z0-9_\-\.]{10,})"), r"\1***REDACTED***"),
    # Passwords
    (
        re.compile(r"(password['\"]?\s*[:=]\s*['\"]?)([^'\"\s,}]+)", re.IGNORECASE),
        r"\1***REDACTED***",
    ),
    # API keys passed as query parameters
    (re.compile(r"([?&]key=)([^&\s'\"]+)"), r"\1***REDACTED***"),
    # Database URLs with credentials
    (re.compile(r"(postgresql(?:\+\w+)?://)([^:/@\s]+):([^@\s]+)@"), r"\1\2:***REDACTED***@"),
]


def sanitize_message(message: str) -> str:
    """Replace credentials in a rendered log message."""
    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


class SensitiveDataFilter(logging.Filter):
    """Redacts credentials from the rendered message of every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        rendered = record.getMessage()
        sanitized = sanitize_message(rendered)
        if sanitized != rendered:
            record.msg = sanitized
            record.args = None
        return True


class SafeRotatingFileHandler(RotatingFileHandler):
    """Size-based rotation handler that keeps writing when rollover fails."""

    def doRollover(self):
        try:
            super().doRollover()
        except OSError as e:
            sys.stderr.write(
                f"Log rotation failed: {e}. Continuing with current log file.\n"
            )
            sys.stderr.flush()


def _get_log_level(level_str: str) -> int:
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(level_str.upper(), logging.INFO)


def _get_log_file() -> Path:
    """Return the per-process log file, creating its date directory once."""
    global _GLOBAL_LOG_FILE
    if _GLOBAL_LOG_FILE is None:
        now = datetime.datetime.now()
        date_dir = Path(LOG_DIR) / now.strftime("%Y-%m-%d")
        date_dir.mkdir(parents=True, exist_ok=True)
        run_timestamp = now.strftime("%Y-%m-%d_%H-%M-%S")
        _GLOBAL_LOG_FILE = date_dir / f"{LOG_FILE_BASENAME}_{run_timestamp}.log"
        cleanup_old_logs(keep_days=7)
    return _GLOBAL_LOG_FILE


def setup_logger(name: str, level: str = None) -> logging.Logger:
    """Set up logger with a console handler and, if LOG_DIR is set, a file handler."""
    logger = logging.getLogger(name)

    log_level = _get_log_level(level) if level else _get_log_level(DEFAULT_LOG_LEVEL)
    logger.setLevel(log_level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if LOG_DIR:
        file_handler = SafeRotatingFileHandler(
            _get_log_file(),
            maxBytes=MAX_LOG_SIZE_BYTES,
            backupCount=MAX_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger


def cleanup_old_logs(keep_days: int = 7) -> int:
    """Delete date directories under LOG_DIR older than keep_days. Returns files removed."""
    if not LOG_DIR:
        return 0

    cutoff_time = datetime.datetime.now() - datetime.timedelta(days=keep_days)
    deleted_count = 0

    for date_dir in Path(LOG_DIR).iterdir():
        if not date_dir.is_dir():
            continue
        try:
            dir_date = datetime.datetime.strptime(date_dir.name, "%Y-%m-%d")
        except ValueError:
            # Not one of ours
            continue
        if dir_date >= cutoff_time:
            continue

        for log_file in date_dir.iterdir():
            try:
                log_file.unlink()
                deleted_count += 1
            except (PermissionError, FileNotFoundError):
                continue
        try:
            date_dir.rmdir()
        except OSError:
            continue

    return deleted_count
