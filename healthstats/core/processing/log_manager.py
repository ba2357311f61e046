"""
Log manager for the healthstats logger hierarchy.

Attaches console and rotating file handlers to the ``healthstats`` logger in
one of three formats, and provides timing helpers for batch operations.
"""

import logging
import logging.handlers
import json
import time
import threading
from typing import Dict, Any, Optional, Union, List
from pathlib import Path
from contextlib import contextmanager
import functools

from ..base.exceptions import ConfigurationError
from ..config.settings import EngineConfig, get_config


PACKAGE_LOGGER = "healthstats"

FORMATS = {
    "standard": '%(asctime)s - %(levelname)s - %(message)s',
    "detailed": '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s',
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for key in ('operation', 'duration'):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class PerformanceLogger:
    """Logger for operation timings."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self._timers: Dict[str, float] = {}
        self._lock = threading.Lock()

    def start_timer(self, name: str) -> None:
        """Start timing operation."""
        with self._lock:
            self._timers[name] = time.perf_counter()

    def end_timer(self, name: str, log_level: int = logging.DEBUG) -> float:
        """End timing and log duration."""
        with self._lock:
            if name not in self._timers:
                self.logger.warning("Timer '%s' not found", name)
                return 0.0
            duration = time.perf_counter() - self._timers.pop(name)

        self.logger.log(log_level, "Operation '%s' completed in %.3fs", name, duration,
                        extra={'operation': name, 'duration': duration})
        return duration

    @contextmanager
    def time_operation(self, name: str, log_level: int = logging.DEBUG):
        """Context manager for timing operations."""
        self.start_timer(name)
        try:
            yield
        finally:
            self.end_timer(name, log_level)

    def time_function(self, name: Optional[str] = None, log_level: int = logging.DEBUG):
        """Decorator for timing functions."""
        def decorator(func):
            timer_name = name or f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.time_operation(timer_name, log_level):
                    return func(*args, **kwargs)
            return wrapper
        return decorator


class LogManager:
    """Configures handlers on the package logger.

    Handlers are attached to ``healthstats`` rather than the root logger so
    that the host application's own logging setup is left alone.
    """

    def __init__(
        self,
        level: Union[str, int] = logging.INFO,
        file_path: Optional[Union[str, Path]] = None,
        max_file_size: int = 10,  # MB
        backup_count: int = 5,
        format_type: str = "standard",
        enable_console: bool = True,
        config: Optional[EngineConfig] = None
    ):
        """Initialize log manager.

        Parameters
        ----------
        level : str or int
            Logging level
        file_path : str or Path, optional
            Log file path
        max_file_size : int
            Max file size in MB for rotation
        backup_count : int
            Number of backup files to keep
        format_type : str
            Format type ("standard", "json", "detailed")
        enable_console : bool
            Enable console logging
        config : EngineConfig, optional
            Configuration providing level, format and file
        """
        if config:
            level = config.log_level
            format_type = config.log_format
            file_path = file_path or config.log_file

        self.level = self._resolve_level(level)
        self._create_formatter(format_type)
        self.file_path = Path(file_path) if file_path else None
        self.max_file_size = max_file_size * 1024 * 1024
        self.backup_count = backup_count
        self.format_type = format_type
        self.enable_console = enable_console

        self.logger = logging.getLogger(PACKAGE_LOGGER)
        self._handlers: List[logging.Handler] = []

        self._setup_package_logger()
        self.performance = PerformanceLogger(self.get_logger('performance'))

        self.logger.debug("LogManager initialized")

    @staticmethod
    def _resolve_level(level: Union[str, int]) -> int:
        if isinstance(level, int):
            return level
        resolved = logging.getLevelName(str(level).upper())
        if not isinstance(resolved, int):
            raise ConfigurationError(f"Unknown log level: {level}", parameter="log_level")
        return resolved

    def get_logger(self, name: str) -> logging.Logger:
        """Get a child of the package logger."""
        if name.startswith(PACKAGE_LOGGER):
            return logging.getLogger(name)
        return self.logger.getChild(name)

    def set_level(self, level: Union[str, int]) -> None:
        """Set logging level on the package logger and its handlers."""
        self.level = self._resolve_level(level)
        self.logger.setLevel(self.level)
        for handler in self._handlers:
            handler.setLevel(self.level)

    def add_file_handler(
        self,
        file_path: Union[str, Path],
        level: Optional[Union[str, int]] = None,
        format_type: Optional[str] = None
    ) -> logging.Handler:
        """Add file handler with rotation."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            file_path,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count
        )
        return self._register(handler, level, format_type)

    def add_console_handler(
        self,
        level: Optional[Union[str, int]] = None,
        format_type: Optional[str] = None
    ) -> logging.Handler:
        """Add console handler."""
        return self._register(logging.StreamHandler(), level, format_type)

    def _register(self, handler: logging.Handler, level, format_type) -> logging.Handler:
        handler.setLevel(self._resolve_level(level) if level else self.level)
        handler.setFormatter(self._create_formatter(format_type or self.format_type))
        self.logger.addHandler(handler)
        self._handlers.append(handler)
        return handler

    def _setup_package_logger(self) -> None:
        self.logger.setLevel(self.level)

        if self.enable_console:
            self.add_console_handler()

        if self.file_path:
            self.add_file_handler(self.file_path)

    def _create_formatter(self, format_type: str) -> logging.Formatter:
        """Create formatter based on type."""
        if format_type == "json":
            return JSONFormatter()
        if format_type not in FORMATS:
            raise ConfigurationError(
                f"Unknown log format '{format_type}'. Available: json, {', '.join(FORMATS)}",
                parameter="log_format",
            )
        return logging.Formatter(FORMATS[format_type])

    def rotate_logs(self) -> None:
        """Manually rotate log files."""
        for handler in self._handlers:
            if isinstance(handler, logging.handlers.RotatingFileHandler):
                handler.doRollover()

    def get_status(self) -> Dict[str, Any]:
        """Get log manager status."""
        return {
            'level': logging.getLevelName(self.level),
            'file_path': str(self.file_path) if self.file_path else None,
            'format_type': self.format_type,
            'console_enabled': self.enable_console,
            'handlers': len(self._handlers),
        }

    def close(self) -> None:
        """Detach and close all handlers added by this manager."""
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def setup_logging(config: Optional[EngineConfig] = None, **kwargs) -> LogManager:
    """Configure package logging from an EngineConfig (default: global config)."""
    if config is None:
        config = get_config()
    return LogManager(config=config, **kwargs)
