"""Logging configuration for canopy-network.

Provides configurable logging with:
- File-based logging with rotation
- Console output for real-time debugging
- Timing decorator and context manager for topology operations

Environment Variables:
    CANOPY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    CANOPY_LOG_FILE: Path to log file (default: ~/.canopy/canopy.log)
    CANOPY_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    CANOPY_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from canopy_network.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("connect")
    def connect(self, first, second):
        ...

    with timed_section_sync("build_group", group="backbone"):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("canopy.perf")
main_logger = logging.getLogger("canopy")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("CANOPY_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".canopy" / "canopy.log"
    path_str = os.environ.get("CANOPY_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging() -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (INFO+ by default, respects CANOPY_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics
    """
    log_level = get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("CANOPY_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("CANOPY_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    perf_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | PERF | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    # Separate file for timing analysis
    perf_log_file = log_file.parent / "canopy-perf.log"
    perf_handler = RotatingFileHandler(
        perf_log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    perf_handler.setLevel(logging.DEBUG)
    perf_handler.setFormatter(perf_format)

    root_logger = logging.getLogger("canopy")
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    # Module loggers live under the package name
    package_logger = logging.getLogger("canopy_network")
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(console_handler)
    package_logger.addHandler(file_handler)

    # canopy.perf also propagates to canopy's console and file handlers
    perf_logger.setLevel(logging.DEBUG)
    perf_logger.addHandler(perf_handler)

    root_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")
    perf_logger.info(f"Performance logging to: {perf_log_file}")


def timed(operation: str):
    """Decorator to log execution time of a function.

    Args:
        operation: Name of the operation (e.g., "connect", "add", "parse")

    Usage:
        @timed("disconnect")
        def disconnect(self, first, second):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000  # ms
                perf_logger.info(f"{operation:20s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}")
                raise

        return wrapper

    return decorator


@contextmanager
def timed_section_sync(operation: str, target: Optional[str] = None, **extra):
    """Context manager for timing code sections.

    Args:
        operation: Name of the operation
        target: Name of the network or group being worked on
        **extra: Additional context to log
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:20s} | {target or 'N/A':15s} | {elapsed:8.2f}ms | OK"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.info(msg)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:20s} | {target or 'N/A':15s} | {elapsed:8.2f}ms | FAIL: {e}"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.warning(msg)
        raise
