"""
Logging configuration for the Ruuvi Collector.
Provides console/file logging setup and lightweight pipeline statistics.
"""

import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional
import colorlog
from datetime import datetime


COMPONENT_LOGGERS = ('ruuvi.hci', 'ruuvi.beacon', 'ruuvi.strategy', 'ruuvi.storage', 'ruuvi.performance')


class ProductionLogger:
    """
    Logging setup for the collector: colored console output, optional
    rotating file output and per-component loggers.
    """

    def __init__(self,
                 app_name: str = "ruuvi_collector",
                 log_dir: str = "./logs",
                 log_level: str = "INFO",
                 max_file_size: int = 10 * 1024 * 1024,  # 10MB
                 backup_count: int = 5,
                 enable_console: bool = True,
                 enable_file: bool = False):

        self.app_name = app_name
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper())
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.enable_console = enable_console
        self.enable_file = enable_file

        if self.enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_root_logger()
        self._setup_component_loggers()

    def _setup_root_logger(self):
        """Configure root logger with console and file handlers."""
        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)

        # Clear existing handlers
        root_logger.handlers.clear()

        # Console goes to stderr so stdout stays clean for command output
        if self.enable_console:
            console_handler = colorlog.StreamHandler(sys.stderr)
            console_handler.setLevel(self.log_level)
            console_formatter = colorlog.ColoredFormatter(
                '%(log_color)s%(asctime)s [%(levelname)8s] %(name)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            )
            console_handler.setFormatter(console_formatter)
            root_logger.addHandler(console_handler)

        if self.enable_file:
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{self.app_name}.log",
                maxBytes=self.max_file_size,
                backupCount=self.backup_count
            )
            file_handler.setLevel(self.log_level)
            file_formatter = logging.Formatter(
                '%(asctime)s [%(levelname)8s] %(name)s [%(process)d:%(thread)d] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            root_logger.addHandler(file_handler)

    def _setup_component_loggers(self):
        """Component loggers propagate to the root handlers at the configured level."""
        for name in COMPONENT_LOGGERS:
            component_logger = logging.getLogger(name)
            component_logger.setLevel(self.log_level)
            component_logger.propagate = True

    def get_logger(self, name: str = None) -> logging.Logger:
        """Get a logger instance."""
        if name:
            return logging.getLogger(name)
        return logging.getLogger()

    def debug(self, message: str, *args, **kwargs):
        """Log debug message."""
        logging.getLogger().debug(message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        """Log info message."""
        logging.getLogger().info(message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        """Log warning message."""
        logging.getLogger().warning(message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        """Log error message."""
        logging.getLogger().error(message, *args, **kwargs)

    def critical(self, message: str, *args, **kwargs):
        """Log critical message."""
        logging.getLogger().critical(message, *args, **kwargs)


class PerformanceMonitor:
    """
    Counters and timings for the collector pipeline.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger('ruuvi.performance')
        self.counters: Dict[str, int] = {}
        self.timings: Dict[str, float] = {}
        self.start_time = datetime.now()

    def increment(self, counter_name: str, amount: int = 1):
        """Increase a named counter."""
        self.counters[counter_name] = self.counters.get(counter_name, 0) + amount

    def count(self, counter_name: str) -> int:
        """Current value of a named counter (0 when never incremented)."""
        return self.counters.get(counter_name, 0)

    @contextmanager
    def measure_time(self, operation_name: str):
        """Context manager accumulating the wall time spent in an operation."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            self.timings[operation_name] = self.timings.get(operation_name, 0.0) + duration
            self.logger.debug(f"TIMING {operation_name}={duration:.6f}s")

    def get_performance_summary(self) -> dict:
        """Generate summary of counters and timings."""
        return {
            'uptime_seconds': (datetime.now() - self.start_time).total_seconds(),
            'counters': dict(self.counters),
            'timings': dict(self.timings),
        }

    def log_summary(self):
        """Write the current counters to the performance logger."""
        counters = " ".join(f"{name}={value}" for name, value in sorted(self.counters.items()))
        self.logger.info(f"PIPELINE {counters}")


def setup_logging(config, log_level: Optional[str] = None) -> ProductionLogger:
    """
    Setup logging for the Ruuvi Collector using configuration.

    Args:
        config: Configuration instance
        log_level: Optional override of the configured level

    Returns:
        ProductionLogger instance
    """
    return ProductionLogger(
        log_level=log_level or config.log_level,
        log_dir=str(config.log_dir),
        max_file_size=config.log_max_file_size,
        backup_count=config.log_backup_count,
        enable_console=config.log_enable_console,
        enable_file=config.log_enable_file
    )
