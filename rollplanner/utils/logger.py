from . import structlog_patch

import asyncio
import functools
import logging
import logging.handlers
import time
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime, timezone
import structlog

from structlog.types import FilteringBoundLogger

from config.settings import get_settings
from .exceptions import RollPlannerError


class PerformanceTimer:
    """Context manager for performance timing"""

    def __init__(self, logger: FilteringBoundLogger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = None
        self.duration_ms: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug("operation_started", operation=self.operation)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
        self.logger.debug(
            "operation_completed",
            operation=self.operation,
            duration_ms=self.duration_ms,
            success=exc_type is None
        )

        if exc_type:
            self.logger.error(
                "operation_failed",
                operation=self.operation,
                error_type=exc_type.__name__,
                error_message=str(exc_val) if exc_val else None,
                duration_ms=self.duration_ms
            )


def add_context_processor(logger, method_name, event_dict):
    """Add contextual information to log records."""
    event_dict['timestamp'] = datetime.now(timezone.utc).isoformat()
    event_dict['method'] = method_name
    return event_dict


def exception_processor(logger, method_name, event_dict):
    """Flatten exceptions passed as `exception=` into the event."""
    if 'exception' in event_dict:
        exc = event_dict['exception']
        if isinstance(exc, RollPlannerError):
            event_dict.pop('exception')
            event_dict.update(exc.to_dict())
        elif isinstance(exc, Exception):
            event_dict.pop('exception')
            event_dict['exception_type'] = exc.__class__.__name__
            event_dict['exception_message'] = str(exc)

    return event_dict


def setup_logging() -> FilteringBoundLogger:
    """Setup logging configuration"""
    settings = get_settings()
    log_config = settings.get_logging_config()
    level = getattr(logging, log_config.level)

    stdlib_logger = logging.getLogger()
    stdlib_logger.setLevel(level)

    # remove existing handlers
    for handler in stdlib_logger.handlers[:]:
        stdlib_logger.removeHandler(handler)

    # structlog renders the whole line
    formatter = logging.Formatter('%(message)s')

    if log_config.file_path:
        log_path = Path(log_config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=log_config.max_file_size_mb * 1024 * 1024,
            backupCount=log_config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        stdlib_logger.addHandler(file_handler)

    if log_config.console_output:
        # stderr keeps CLI output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        stdlib_logger.addHandler(console_handler)

    for name in list(logging.Logger.manager.loggerDict):
        logging.getLogger(name).setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            add_context_processor,
            exception_processor,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_config.format == "structured"
            else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False
    )

    return structlog.get_logger(settings.shared.defaults.system.name)


def get_logger(name: str = None) -> FilteringBoundLogger:
    """Get logger instance"""
    settings = get_settings()
    logger_name = name or settings.shared.defaults.system.name
    logging.getLogger(logger_name).setLevel(getattr(logging, settings.logging.level))

    return structlog.get_logger(logger_name)


def log_performance(operation: str):
    """Decorator for performance logging"""
    def decorator(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            with PerformanceTimer(logger, operation):
                return await func(*args, **kwargs)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            with PerformanceTimer(logger, operation):
                return func(*args, **kwargs)

        return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper

    return decorator


# global logger instance
_logger: Optional[FilteringBoundLogger] = None


def init_logging() -> FilteringBoundLogger:
    """Initialize logging system"""
    global _logger
    _logger = setup_logging()
    _logger.info("logging_system_initialized")
    return _logger


def get_global_logger() -> FilteringBoundLogger:
    """Get global logger"""
    global _logger
    if _logger is None:
        _logger = init_logging()
    return _logger
