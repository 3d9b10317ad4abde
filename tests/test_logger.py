"""
Tests for logger functionality.
"""

import pytest
from pathlib import Path
from jobboard.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["uploads_attempted"] == 0

    def test_log_with_context_written_to_file(self, tmp_path):
        logger = StructuredLogger(
            name="test-context",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Upload started", kind="Resume", document="/docs/cv.pdf")
        for handler in logger.logger.handlers:
            handler.flush()

        log_files = list(tmp_path.glob("jobboard_*.log"))
        assert len(log_files) == 1
        content = log_files[0].read_text(encoding="utf-8")
        assert "Upload started | Context:" in content
        assert '"kind": "Resume"' in content

    def test_upload_metrics(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.record_upload_attempt("Resume")
        logger.record_upload_success("Resume")
        logger.record_upload_attempt("Certificate")
        logger.record_upload_failure("Certificate", "UploadError")
        logger.record_upload_attempt("Certificate")
        logger.record_upload_discarded("Certificate")

        metrics = logger.get_metrics()

        assert metrics["uploads_attempted"] == 3
        assert metrics["uploads_completed"] == 1
        assert metrics["uploads_failed"] == 1
        assert metrics["uploads_discarded"] == 1
        assert metrics["errors_by_type"]["UploadError"] == 1
        assert metrics["upload_success_rate"]["Resume"]["success_rate"] == 1.0
        assert metrics["upload_success_rate"]["Certificate"]["success_rate"] == 0.0

    def test_save_and_reward_metrics(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)

        logger.record_save_attempt()
        logger.record_save_failure("SaveError")
        logger.record_save_attempt()
        logger.record_save_success()
        logger.record_tier_crossed()
        logger.record_validation()

        metrics = logger.get_metrics()
        assert metrics["saves_attempted"] == 2
        assert metrics["saves_failed"] == 1
        assert metrics["saves_succeeded"] == 1
        assert metrics["tiers_crossed"] == 1
        assert metrics["validations_run"] == 1
        assert metrics["errors_by_type"] == {"SaveError": 1}

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        logger.record_upload_attempt("Resume")
        logger.record_upload_failure("Resume", "UploadError")

        # Should not raise exceptions
        logger.log_metrics_summary()


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_returns_same_instance(self, tmp_path):
        reset_logger()
        first = get_logger(log_dir=tmp_path, enable_console=False)
        second = get_logger()
        assert first is second

    def test_reset_logger(self, tmp_path):
        first = get_logger()
        reset_logger()
        second = get_logger(log_dir=tmp_path, enable_console=False)
        assert first is not second
