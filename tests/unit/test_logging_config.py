"""
Unit tests for logging setup (session files and retention).
"""

import logging

import pytest

from storyrank.logging_config import SESSION_LOGS_KEPT, setup_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:

    def test_creates_session_log(self, tmp_path, restore_root_logger):
        session_log = setup_logging(log_file=str(tmp_path / "logs" / "storyrank.log"))

        logging.getLogger("storyrank.test").debug("debug goes to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert session_log.exists()
        assert session_log.name.startswith("storyrank_")
        assert "debug goes to file" in session_log.read_text(encoding="utf-8")

    def test_old_session_logs_pruned(self, tmp_path, restore_root_logger):
        log_dir = tmp_path / "logs"
        log_dir.mkdir()
        for day in range(1, 9):
            (log_dir / f"storyrank_2024010{day}_000000.log").write_text("old")

        setup_logging(log_file=str(log_dir / "storyrank.log"))

        assert len(list(log_dir.glob("storyrank_*.log"))) == SESSION_LOGS_KEPT
        assert not (log_dir / "storyrank_20240101_000000.log").exists()
