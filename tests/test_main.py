import os
import tempfile
from unittest import TestCase
from unittest.mock import patch

from sqlalchemy import inspect

from authdb.db import close_db, get_db
from authdb.main import main
from authdb.util.logging import logger


class TestMain(TestCase):
    @patch("authdb.main.initialize")
    @patch("authdb.main.healthcheck")
    def test_healthcheck_command(self, mock_healthcheck, mock_initialize):
        self.assertEqual(main(["healthcheck"]), 0)

        mock_healthcheck.assert_called_once_with()
        mock_initialize.assert_not_called()

    @patch("authdb.main.initialize")
    @patch("authdb.main.healthcheck")
    def test_init_command(self, mock_healthcheck, mock_initialize):
        self.assertEqual(main(["init"]), 0)

        mock_initialize.assert_called_once_with()
        mock_healthcheck.assert_not_called()

    @patch("authdb.main.initialize")
    def test_no_arguments_runs_init(self, mock_initialize):
        self.assertEqual(main([]), 0)
        mock_initialize.assert_called_once_with()

    @patch("authdb.main.initialize")
    @patch("sys.argv", ["authdb", "init"])
    def test_reads_sys_argv_by_default(self, mock_initialize):
        self.assertEqual(main(), 0)
        mock_initialize.assert_called_once_with()

    @patch("authdb.main.logger")
    @patch("authdb.main.initialize")
    def test_unknown_command(self, mock_initialize, mock_logger):
        self.assertEqual(main(["migrate"]), 2)

        mock_initialize.assert_not_called()
        mock_logger.error.assert_called_once()

    def test_init_creates_schema_on_disk(self):
        self.addCleanup(logger.setLevel, logger.level)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "data", "auth.db")
            with patch.dict(os.environ, {"DATABASE_URL": path, "LOG_LEVEL": "WARNING"}):
                self.assertEqual(main(["init"]), 0)

            tables = set(inspect(get_db().engine).get_table_names())
            close_db()

            self.assertTrue({"user", "session", "oauth_account"} <= tables)

    def test_init_with_unknown_log_level_still_runs(self):
        self.addCleanup(logger.setLevel, logger.level)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "auth.db")
            with patch.dict(os.environ, {"DATABASE_URL": path, "LOG_LEVEL": "verbose"}):
                self.assertEqual(main(["init"]), 0)
            close_db()

            self.assertTrue(os.path.isfile(path))
