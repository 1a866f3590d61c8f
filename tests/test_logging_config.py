"""Tests for logging_config.py."""

import logging

from styleguard.logging_config import get_logger, setup_logging


class TestSetupLogging:
    def test_levels(self):
        assert setup_logging().level == logging.WARNING
        assert setup_logging(verbose=True).level == logging.DEBUG
        assert setup_logging(verbose=True, quiet=True).level == logging.ERROR

    def test_log_file_receives_records(self, tmp_path):
        log_file = tmp_path / "styleguard.log"
        setup_logging(log_file=str(log_file))
        get_logger("pipeline").warning("Skipping missing.c: path does not exist")
        for handler in logging.getLogger().handlers:
            handler.flush()
        text = log_file.read_text()
        assert "styleguard.pipeline - WARNING - Skipping missing.c" in text
        setup_logging()


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger().name == "styleguard"
        assert get_logger("scanning.scanner").name == "styleguard.scanning.scanner"
        assert get_logger("styleguard.pipeline").name == "styleguard.pipeline"
