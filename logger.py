"""
Logging configuration for the nurse roster optimizer.
"""

import logging
import os
import time
import functools
from contextlib import contextmanager
from datetime import datetime

LOGGER_NAMESPACE = 'rota'

# Log directory and file
LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
LOG_FILE = os.path.join(LOG_DIR, f"rota_{datetime.now().strftime('%Y%m%d')}.log")

# Set ROTA_LOG_FILE=1 to mirror console output into LOG_FILE
LOG_TO_FILE_ENV = 'ROTA_LOG_FILE'


def setup_logging(level=logging.INFO, log_to_file=None):
    """
    Configure the 'rota' logger hierarchy.

    Args:
        level: Logging level for the namespace logger and its handlers
        log_to_file: Also write to LOG_FILE. None defers to the ROTA_LOG_FILE
            environment variable.

    Returns:
        The namespace logger
    """
    if log_to_file is None:
        log_to_file = os.environ.get(LOG_TO_FILE_ENV, '') == '1'

    if log_to_file and not os.path.exists(LOG_DIR):
        os.makedirs(LOG_DIR)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    # Re-running setup must not stack handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def set_level(level) -> None:
    """Change the level of the namespace logger and all of its handlers."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)
    for handler in root.handlers:
        handler.setLevel(level)


def get_logger(name=None):
    """
    Get a logger instance.

    Args:
        name: Optional component name (prefixed with 'rota.')

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f'{LOGGER_NAMESPACE}.{name}')
    return logging.getLogger(LOGGER_NAMESPACE)


@contextmanager
def log_timing(operation_name: str, logger_instance=None):
    """
    Log the wall time of a block.

    Usage:
        with log_timing("feasibility check"):
            check_feasibility()
    """
    log = logger_instance or get_logger('perf')
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        log.info(f"{operation_name}: {elapsed:.4f}s")


def timed(func=None, *, name=None):
    """
    Decorator that logs how long each call takes.

    Usage:
        @timed
        def optimize():
            ...

        @timed(name="optimizer run")
        def optimize():
            ...
    """
    def decorator(fn):
        op_name = name or fn.__qualname__

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            log = get_logger('perf')
            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start
                log.error(f"{op_name}: {elapsed:.4f}s (failed with {type(e).__name__})")
                raise
            log.info(f"{op_name}: {elapsed_since(start):.4f}s")
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def elapsed_since(start: float) -> float:
    """Seconds elapsed since a time.perf_counter() reading."""
    return time.perf_counter() - start


class PerformanceTracker:
    """
    Cumulative timings for operations repeated once per generation.

    Usage:
        tracker = PerformanceTracker()

        for _ in range(generations):
            with tracker.track("breeding"):
                breed()

        tracker.report()
    """

    def __init__(self, logger_instance=None):
        self.logger = logger_instance or get_logger('perf')
        self.timings: dict[str, list[float]] = {}

    @contextmanager
    def track(self, operation_name: str):
        """Accumulate the time spent in one occurrence of an operation."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.timings.setdefault(operation_name, []).append(elapsed_since(start))

    def summary(self) -> dict[str, dict[str, float]]:
        """Per-operation totals, counts and averages, slowest total first."""
        result = {}
        for op, times in sorted(self.timings.items(), key=lambda x: -sum(x[1])):
            total = sum(times)
            result[op] = {
                'total': total,
                'count': len(times),
                'avg': total / len(times),
                'max': max(times),
            }
        return result

    def report(self, title: str = "Phase timings", level=logging.DEBUG):
        """Log the summary and return it."""
        summary = self.summary()
        self.logger.log(level, title)
        for op, s in summary.items():
            self.logger.log(
                level,
                f"  {op:20s} | total: {s['total']:8.4f}s | count: {s['count']:6d} | "
                f"avg: {s['avg']:.6f}s | max: {s['max']:.6f}s"
            )
        return summary


# Initialize logging when module is imported
logger = setup_logging()
