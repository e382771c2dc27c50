"""
Tests for session logging setup.
"""

import logging
import tempfile
import unittest
from pathlib import Path

from utils.logging_setup import setup_session_logging


class TestSessionLogging(unittest.TestCase):

    def setUp(self):
        self.root_logger = logging.getLogger()
        self.saved_handlers = self.root_logger.handlers[:]
        self.saved_level = self.root_logger.level
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        for handler in self.root_logger.handlers[:]:
            self.root_logger.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.saved_level)
        self.tmp.cleanup()

    def test_session_directory_and_log_file(self):
        run_dir, log_file = setup_session_logging(Path(self.tmp.name), "sample_games", logging.DEBUG)

        self.assertTrue(run_dir.is_dir())
        self.assertTrue(run_dir.name.endswith("_sample_games"))
        self.assertEqual(log_file, run_dir / "games.log")

        logging.getLogger("engine.game").debug("placed piece 1")
        for handler in self.root_logger.handlers:
            handler.flush()
        self.assertIn("engine.game - DEBUG - placed piece 1", log_file.read_text(encoding="utf-8"))

    def test_repeated_setup_replaces_handlers(self):
        setup_session_logging(Path(self.tmp.name), "first")
        setup_session_logging(Path(self.tmp.name), "second")
        self.assertEqual(len(self.root_logger.handlers), 2)


if __name__ == '__main__':
    unittest.main()
