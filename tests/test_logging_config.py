"""Log record timestamps are rendered in UTC to match their Z suffix."""

import logging
import time
import unittest

from app.core.config import get_settings
from app.core.logging_config import configure_logging


class TestConfigureLogging(unittest.TestCase):
    def setUp(self) -> None:
        self.original_converter = logging.Formatter.converter

    def tearDown(self) -> None:
        logging.Formatter.converter = self.original_converter

    def test_timestamps_use_utc(self) -> None:
        configure_logging(get_settings())
        self.assertIs(logging.Formatter.converter, time.gmtime)

    def test_formatted_time_is_utc(self) -> None:
        configure_logging(get_settings())
        formatter = logging.Formatter("%(asctime)s", datefmt="%Y-%m-%dT%H:%M:%SZ")
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "m", None, None)
        record.created = 0.0
        self.assertEqual(formatter.formatTime(record, formatter.datefmt), "1970-01-01T00:00:00Z")
