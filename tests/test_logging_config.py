# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import unittest

from src.config.logging_config import ROOT_LOGGER_NAME, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the price_compare logger before each test."""
        self._clear()

    def tearDown(self) -> None:
        self._clear()

    @staticmethod
    def _clear() -> None:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging()
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_log_file_inside_logs_dir(self) -> None:
        """Log file is created inside the logs/ directory."""
        log_path = setup_logging()
        self.assertEqual(log_path.parent.name, "logs")

    def test_file_handler_level_debug(self) -> None:
        """File handler captures DEBUG."""
        setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        file_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_configurable(self) -> None:
        """Console handler defaults to WARNING and can be lowered."""
        setup_logging(console_level=logging.INFO)
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        stream_handlers = [
            h
            for h in root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(stream_handlers), 1)
        self.assertEqual(stream_handlers[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging()
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        count_before = len(root_logger.handlers)
        setup_logging()
        self.assertEqual(len(root_logger.handlers), count_before)

    def test_provider_logs_reach_file(self) -> None:
        """Child loggers of providers write into the run log."""
        log_path = setup_logging()
        logging.getLogger(f"{ROOT_LOGGER_NAME}.angeloni").error(
            "[Angeloni] boom"
        )
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        self.assertIn(
            "[Angeloni] boom", log_path.read_text(encoding="utf-8")
        )

    def test_noisy_third_party_loggers_raised(self) -> None:
        """asyncio debug chatter is kept out of the run log."""
        setup_logging()
        self.assertEqual(
            logging.getLogger("asyncio").level, logging.WARNING
        )


if __name__ == "__main__":
    unittest.main()
