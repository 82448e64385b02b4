"""
CLI helper utilities.

This module provides shared utilities for CLI commands including:
- Configuration loading
- Logging setup
- Output writing
"""

import json
import logging
import os
import sys
import tempfile
from datetime import datetime, timezone
from logging import Handler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple

from ...config import AppConfig
from ...constants import LoggingConfig

# Type alias for log levels
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JSONFormatter(logging.Formatter):
    """A lightweight JSON formatter for structured logging."""

    _RESERVED_FIELDS = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "process",
        "processName",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
            LoggingConfig.JSON_DATE_FORMAT
        )
        payload: Dict[str, Any] = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.threadName,
        }

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        # Fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key in self._RESERVED_FIELDS or key.startswith("_") or key in payload:
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


_MANAGED_HANDLERS: List[Handler] = []
_LOGGING_SIGNATURE: Optional[Tuple[Any, ...]] = None
_LAST_LOG_FILE: Optional[str] = None


def get_default_config_path() -> str:
    """Path of ``config.json`` in the current working directory."""
    return str(Path.cwd() / "config.json")


def _clear_managed_handlers() -> None:
    """Remove handlers that were added by this module."""
    global _MANAGED_HANDLERS
    root_logger = logging.getLogger()
    for handler in _MANAGED_HANDLERS:
        root_logger.removeHandler(handler)
        handler.close()
    _MANAGED_HANDLERS = []


def _coerce_positive_int(value: Any, default: int) -> int:
    try:
        numeric = int(value)
        return numeric if numeric > 0 else default
    except (TypeError, ValueError):
        return default


def _create_file_handler(path: str, rotation_enabled: bool, max_bytes: int, backup_count: int) -> Handler:
    if rotation_enabled and max_bytes > 0:
        return RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=max(backup_count, 1),
            encoding='utf-8'
        )
    return logging.FileHandler(path, encoding='utf-8')


def setup_logging(
    level: LogLevel = LoggingConfig.DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    *,
    config: Optional[Dict[str, Any]] = None,
    include_console: bool = True,
) -> Optional[str]:
    """
    Setup logging configuration with fallback locations.

    If the primary log file location fails (permission denied, disk full, etc.),
    attempts to write to fallback locations in order:
    1. Requested location
    2. System temp directory
    3. User home directory
    4. Console-only (final fallback)

    Console output goes to stderr so that exported documents written to
    stdout stay clean.

    Args:
        level: Log level when the config block has none.
        log_file: Log file override.
        config: The ``logging`` configuration block.
        include_console: If False, skip adding a console handler.

    Returns:
        The actual log file path used, or None if logging to console only.
    """
    global _LOGGING_SIGNATURE, _LAST_LOG_FILE

    config_dict = dict(config or {})

    resolved_level = str(config_dict.get('level', level or LoggingConfig.DEFAULT_LOG_LEVEL))
    log_level = getattr(logging, resolved_level.upper(), logging.INFO)

    file_path = log_file if log_file is not None else (config_dict.get('file') or config_dict.get('log_file'))

    format_style = str(config_dict.get('format', LoggingConfig.DEFAULT_FORMAT_STYLE)).lower()
    if format_style not in LoggingConfig.SUPPORTED_FORMATS:
        format_style = LoggingConfig.DEFAULT_FORMAT_STYLE
    structured = format_style == 'json'

    formatter: logging.Formatter
    if structured:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            fmt=config_dict.get('pattern') or LoggingConfig.LOG_FORMAT,
            datefmt=config_dict.get('date_format', LoggingConfig.DATE_FORMAT),
        )

    rotation_cfg = config_dict.get('rotation') if isinstance(config_dict.get('rotation'), dict) else {}
    rotation_enabled = rotation_cfg.get('enabled')
    if rotation_enabled is None:
        rotation_enabled = bool(file_path) and LoggingConfig.ROTATION_ENABLED
    max_bytes = _coerce_positive_int(
        rotation_cfg.get('max_mb', LoggingConfig.MAX_LOG_FILE_MB), LoggingConfig.MAX_LOG_FILE_MB
    ) * 1024 * 1024
    backup_count = _coerce_positive_int(
        rotation_cfg.get('backup_count', LoggingConfig.LOG_BACKUP_COUNT), LoggingConfig.LOG_BACKUP_COUNT
    )

    signature = (log_level, file_path, format_style, include_console, rotation_enabled, max_bytes, backup_count)
    if _LOGGING_SIGNATURE == signature and _MANAGED_HANDLERS:
        return _LAST_LOG_FILE

    handlers: List[Handler] = []
    actual_log_file = None

    if include_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if file_path:
        log_filename = os.path.basename(file_path) or LoggingConfig.DEFAULT_LOG_FILENAME
        fallback_locations = [
            file_path,
            os.path.join(tempfile.gettempdir(), log_filename),
            os.path.join(Path.home(), log_filename),
        ]
        for fallback_path in fallback_locations:
            try:
                log_dir = os.path.dirname(fallback_path)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)
                file_handler = _create_file_handler(
                    fallback_path,
                    rotation_enabled=bool(rotation_enabled),
                    max_bytes=max_bytes,
                    backup_count=backup_count,
                )
            except OSError as exc:
                print(f"  Could not create log at {fallback_path}: {exc}", file=sys.stderr)
                continue
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
            actual_log_file = fallback_path
            if fallback_path != file_path:
                print(f"Note: Using fallback log file: {fallback_path}", file=sys.stderr)
            break
        else:
            print("Warning: Could not write log file to any location, logging to console only", file=sys.stderr)

    if not handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    _clear_managed_handlers()
    root_logger = logging.getLogger()
    logging.captureWarnings(True)
    root_logger.setLevel(log_level)
    for handler in handlers:
        root_logger.addHandler(handler)
        _MANAGED_HANDLERS.append(handler)

    _LOGGING_SIGNATURE = signature
    _LAST_LOG_FILE = actual_log_file

    if actual_log_file:
        logging.getLogger(__name__).info(f"Logging to: {actual_log_file}")
    return actual_log_file


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the application configuration.

    An explicit ``config_path`` must exist. Without one, ``config.json`` in
    the working directory is used when present, else the defaults.

    Raises:
        FileNotFoundError: If an explicit configuration file does not exist.
        ValueError: If the file is not a valid JSON object.
    """
    if config_path:
        return AppConfig.from_file(config_path)
    default_path = get_default_config_path()
    if os.path.exists(default_path):
        return AppConfig.from_file(default_path)
    return AppConfig()


def write_output(content: str, output_path: Optional[str] = None) -> None:
    """Write ``content`` to ``output_path``, or to stdout when None."""
    if not output_path:
        sys.stdout.write(content)
        if content and not content.endswith("\n"):
            sys.stdout.write("\n")
        return
    path = Path(output_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


def print_header(title: str, width: int = 60) -> None:
    print("\n" + "=" * width, file=sys.stderr)
    print(title, file=sys.stderr)
    print("=" * width, file=sys.stderr)
