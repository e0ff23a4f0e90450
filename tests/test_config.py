"""
Tests for configuration helpers and logging setup.
"""

import logging
import os
import shutil
import tempfile
import unittest
from datetime import date
from pathlib import Path
from unittest.mock import patch

from treasure_hunt import config
from treasure_hunt.config import _env_bool, _env_date, _env_float, _env_int, _env_path
from treasure_hunt.logging_config import ShortPathFilter, configure_logging, configure_logging_from_config


class TestEnvHelpers(unittest.TestCase):

    def test_env_int(self):
        with patch.dict(os.environ, {"X_INT": "42", "X_BAD": "forty"}):
            self.assertEqual(_env_int("X_INT", 1), 42)
            self.assertEqual(_env_int("X_BAD", 1), 1)
            self.assertEqual(_env_int("X_MISSING_INT", 7), 7)

    def test_env_bool(self):
        with patch.dict(os.environ, {"X_ON": "Yes", "X_OFF": "0", "X_ODD": "maybe"}):
            self.assertTrue(_env_bool("X_ON", False))
            self.assertFalse(_env_bool("X_OFF", True))
            self.assertTrue(_env_bool("X_ODD", True))

    def test_env_float_and_path(self):
        with patch.dict(os.environ, {"X_FLOAT": "-5.5", "X_PATH": " logs/here "}):
            self.assertEqual(_env_float("X_FLOAT", 0.0), -5.5)
            self.assertEqual(_env_path("X_PATH", Path("default")), Path("logs/here"))
            self.assertEqual(_env_path("X_MISSING_PATH", Path("default")), Path("default"))

    def test_env_date(self):
        with patch.dict(os.environ, {"X_DATE": "2025-01-31", "X_BAD_DATE": "31/01/2025"}):
            self.assertEqual(_env_date("X_DATE", date(2000, 1, 1)), date(2025, 1, 31))
            self.assertEqual(_env_date("X_BAD_DATE", date(2000, 1, 1)), date(2000, 1, 1))


class TestLogging(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        for handler in logging.getLogger().handlers[:]:
            handler.close()
            logging.getLogger().removeHandler(handler)
        shutil.rmtree(self.temp_dir)

    def test_short_path_filter(self):
        record = logging.LogRecord("x", logging.INFO, "/srv/treasure_hunt/generator.py", 10, "msg", None, None)
        self.assertTrue(ShortPathFilter().filter(record))
        self.assertEqual(record.parent_file, "treasure_hunt/generator.py")

    def test_configure_logging_writes_file(self):
        logger = configure_logging(
            logger_name="treasure_hunt.test",
            level=logging.DEBUG,
            log_dir=self.temp_dir,
            log_filename="run",
            in_terminal=False,
        )
        logger.info("hello treasure")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = Path(self.temp_dir, "run.log").read_text(encoding="utf-8")
        self.assertIn("hello treasure", content)
        self.assertIn("tests/test_config.py", content)

    def test_configure_logging_from_config_uses_config_format(self):
        class FileOnlyConfig(config.TestConfig):
            LOG_DIR = Path(self.temp_dir)
            LOG_FILE = Path("config_run.log")
            LOG_TO_FILE = True
            LOG_TO_CONSOLE = False
            LOG_FORMAT = "%(levelname)s >> %(parent_file)s >> %(message)s"

        logger = configure_logging_from_config(FileOnlyConfig)
        logger.warning("dig here")
        for handler in logging.getLogger().handlers:
            handler.flush()

        self.assertEqual(logger.name, "treasure_hunt")
        self.assertEqual([h.__class__.__name__ for h in logging.getLogger().handlers], ["RotatingFileHandler"])
        content = Path(self.temp_dir, "config_run.log").read_text(encoding="utf-8")
        self.assertIn("WARNING >> tests/test_config.py >> dig here", content)


if __name__ == '__main__':
    unittest.main()
