"""
Structured logging for rankmerge.

Provides a logger with console and optional file output, plus metrics
tracking for monitoring how many ranked entries actually resolve to records.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime
import json


class StructuredLogger:
    """
    Centralized logger with support for console and file outputs.
    Tracks resolution metrics across resolve calls.
    """

    def __init__(
        self,
        name: str = "rankmerge",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = False,
        enable_console: bool = True,
    ):
        """
        Initialize the structured logger.

        Args:
            name: Logger name
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files (default: logs/)
            enable_file: Write logs to file
            enable_console: Output logs to console
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self.logger.handlers.clear()

        self.metrics = {
            "resolves": 0,
            "entries_received": 0,
            "entries_resolved": 0,
            "records_loaded": 0,
            "dropped_unresolved_keys": 0,
            "dropped_missing_records": 0,
            "key_collisions": 0,
            "shape_errors": 0,
        }

        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"rankmerge_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

    def set_level(self, level: str):
        """
        Change the log level of the logger and its console handlers.

        File handlers keep logging everything.
        """
        numeric = getattr(logging, level.upper())
        self.logger.setLevel(numeric)
        for handler in self.logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(numeric)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional context."""
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional context."""
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional context."""
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional context."""
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs):
        """Log critical message with optional context."""
        self._log(logging.CRITICAL, message, kwargs)

    def _log(self, level: int, message: str, context: dict):
        if context:
            # Keys and ids are often ints or UUIDs
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_resolve(self, entries: int):
        """Record a resolve call over a ranked result of the given size."""
        self.metrics["resolves"] += 1
        self.metrics["entries_received"] += entries

    def record_records_loaded(self, count: int):
        self.metrics["records_loaded"] += count

    def record_resolved(self, count: int):
        self.metrics["entries_resolved"] += count

    def record_drop(self, reason: str):
        """Record a ranked entry dropped from the output.

        Args:
            reason: Either "unresolved_key" or "missing_record"
        """
        self.metrics[f"dropped_{reason}s"] += 1

    def record_key_collision(self):
        self.metrics["key_collisions"] += 1

    def record_shape_error(self):
        self.metrics["shape_errors"] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        metrics_copy = self.metrics.copy()
        received = metrics_copy["entries_received"]
        metrics_copy["resolution_rate"] = (
            round(metrics_copy["entries_resolved"] / received, 3) if received > 0 else 0
        )
        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        self.info("=== Resolution Metrics ===")
        self.info(f"Resolve calls: {metrics['resolves']}")
        self.info(
            f"Entries: {metrics['entries_resolved']}/{metrics['entries_received']} "
            f"({metrics['resolution_rate'] * 100:.1f}% resolved)"
        )
        self.info(f"Records loaded: {metrics['records_loaded']}")

        dropped = metrics["dropped_unresolved_keys"] + metrics["dropped_missing_records"]
        if dropped:
            self.info("Dropped entries:")
            self.info(f"  unresolved keys: {metrics['dropped_unresolved_keys']}")
            self.info(f"  missing records: {metrics['dropped_missing_records']}")

        if metrics["key_collisions"]:
            self.warning(f"Key collisions: {metrics['key_collisions']}")
        if metrics["shape_errors"]:
            self.warning(f"Shape errors: {metrics['shape_errors']}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "rankmerge",
    level: str = "INFO",
    **kwargs
) -> StructuredLogger:
    """
    Get or create the global logger instance.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **kwargs: Additional arguments passed to StructuredLogger

    Returns:
        StructuredLogger instance
    """
    global _global_logger

    if _global_logger is None:
        _global_logger = StructuredLogger(name=name, level=level, **kwargs)

    return _global_logger


def reset_logger():
    """Reset the global logger (useful for testing)."""
    global _global_logger
    _global_logger = None
