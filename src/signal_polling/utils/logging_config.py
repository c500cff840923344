"""
Logging configuration with millisecond precision

Provides structured logging with both JSON and text formats,
supporting millisecond-precision timestamps.
"""

import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from ..config.settings import settings


def add_millisecond_timestamp(logger, method_name, event_dict):
    """Add a local timestamp with millisecond precision"""
    event_dict["timestamp"] = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
    return event_dict


_SHARED_PROCESSORS = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    add_millisecond_timestamp,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
]


def _build_formatter(log_format: str) -> logging.Formatter:
    """Create the stdlib formatter rendering structlog events"""
    if log_format.lower() == 'json':
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging() -> structlog.stdlib.BoundLogger:
    """
    Setup logging configuration with millisecond precision

    Returns:
        Configured structlog logger
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Ensure logs directory exists
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = _build_formatter(settings.log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.log_file:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                settings.log_file,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=settings.log_backup_count,
                encoding='utf-8'
            )
        except OSError as e:
            print(f"Warning: Could not create file handler for {settings.log_file}: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + _SHARED_PROCESSORS + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("signal_polling")
    logger.info(
        "Logging configured",
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        console_output=True
    )

    return logger


def get_logger(name: str = "signal_polling") -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance

    Args:
        name: Logger name

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


# Global logger instance
_global_logger: Optional[structlog.stdlib.BoundLogger] = None


def init_logging() -> structlog.stdlib.BoundLogger:
    """Initialize global logging configuration"""
    global _global_logger
    if _global_logger is None:
        _global_logger = setup_logging()
    return _global_logger


def get_global_logger() -> structlog.stdlib.BoundLogger:
    """Get the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = init_logging()
    return _global_logger
