"""
Structured logging system for jobboard.

Provides centralized logging with console and file outputs, log levels,
and metrics tracking for validation, upload, save and reward activity.
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
    Tracks metrics for monitoring session activity.
    """

    def __init__(
        self,
        name: str = "jobboard",
        level: str = "INFO",
        log_dir: Optional[Path] = None,
        enable_file: bool = True,
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
        self.logger.handlers.clear()  # Remove existing handlers

        # Metrics tracking
        self.metrics = {
            "validations_run": 0,
            "uploads_attempted": 0,
            "uploads_completed": 0,
            "uploads_failed": 0,
            "uploads_discarded": 0,
            "saves_attempted": 0,
            "saves_succeeded": 0,
            "saves_failed": 0,
            "tiers_crossed": 0,
            "errors_by_type": {},
            "upload_success_rate": {},
        }

        # Console handler
        if enable_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(getattr(logging, level.upper()))
            console_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

        # File handler
        if enable_file:
            if log_dir is None:
                log_dir = Path("logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            log_file = log_dir / f"jobboard_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)  # Always log everything to file
            file_formatter = logging.Formatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

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
        """Internal logging method with context."""
        if context:
            message = f"{message} | Context: {json.dumps(context, default=str)}"
        self.logger.log(level, message)

    # Metric tracking methods

    def record_validation(self):
        """Increment validation pass counter."""
        self.metrics["validations_run"] += 1

    def record_upload_attempt(self, kind: str):
        """Record an upload entering the uploading state."""
        self.metrics["uploads_attempted"] += 1
        if kind not in self.metrics["upload_success_rate"]:
            self.metrics["upload_success_rate"][kind] = {
                "attempts": 0,
                "successes": 0
            }
        self.metrics["upload_success_rate"][kind]["attempts"] += 1

    def record_upload_success(self, kind: str):
        """Record a completed upload."""
        self.metrics["uploads_completed"] += 1
        if kind in self.metrics["upload_success_rate"]:
            self.metrics["upload_success_rate"][kind]["successes"] += 1

    def record_upload_failure(self, kind: str, error_type: str):
        """Record a failed upload."""
        self.metrics["uploads_failed"] += 1
        self._record_error(error_type)

    def record_upload_discarded(self, kind: str):
        """Record an upload resolution dropped after session teardown."""
        self.metrics["uploads_discarded"] += 1

    def record_save_attempt(self):
        self.metrics["saves_attempted"] += 1

    def record_save_success(self):
        self.metrics["saves_succeeded"] += 1

    def record_save_failure(self, error_type: str):
        self.metrics["saves_failed"] += 1
        self._record_error(error_type)

    def record_tier_crossed(self):
        self.metrics["tiers_crossed"] += 1

    def _record_error(self, error_type: str):
        if error_type not in self.metrics["errors_by_type"]:
            self.metrics["errors_by_type"][error_type] = 0
        self.metrics["errors_by_type"][error_type] += 1

    def get_metrics(self) -> dict:
        """Return current metrics."""
        # Calculate success rates
        metrics_copy = self.metrics.copy()
        for kind, stats in metrics_copy["upload_success_rate"].items():
            if stats["attempts"] > 0:
                stats["success_rate"] = round(
                    stats["successes"] / stats["attempts"], 3
                )

        return metrics_copy

    def log_metrics_summary(self):
        """Log a summary of current metrics."""
        metrics = self.get_metrics()

        total_attempts = metrics["uploads_attempted"]
        total_successes = metrics["uploads_completed"]
        overall_rate = 0
        if total_attempts > 0:
            overall_rate = round(total_successes / total_attempts * 100, 1)

        self.info("=== Session Metrics ===")
        self.info(f"Validations: {metrics['validations_run']}")
        self.info(f"Uploads: {total_successes}/{total_attempts} ({overall_rate}% success)")
        self.info(
            f"Saves: {metrics['saves_succeeded']}/{metrics['saves_attempted']} "
            f"({metrics['saves_failed']} failed)"
        )
        self.info(f"Tiers crossed: {metrics['tiers_crossed']}")

        if metrics["upload_success_rate"]:
            self.info("Upload Success Rates:")
            for kind, stats in metrics["upload_success_rate"].items():
                rate = stats.get("success_rate", 0) * 100
                self.info(f"  {kind}: {stats['successes']}/{stats['attempts']} ({rate:.1f}%)")

        if metrics["errors_by_type"]:
            self.info("Error Types:")
            for error_type, count in metrics["errors_by_type"].items():
                self.info(f"  {error_type}: {count}")


# Global logger instance
_global_logger: Optional[StructuredLogger] = None


def get_logger(
    name: str = "jobboard",
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
