"""Unit tests for logging utilities."""

import json
import logging
from pathlib import Path

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem
from pytest_mock import MockerFixture

from gitline.utils import create_logger, create_null_logger


class TestCreateLogger:
    def test_creates_log_directory_if_missing(self, fs: FakeFilesystem) -> None:
        from gitline.utils._logging import _create_logger

        log_path = Path("/logs/gitline.log")
        assert not log_path.parent.exists()

        _ = _create_logger(str(log_path))

        assert log_path.parent.exists()

    def test_default_format_is_json(self, fs: FakeFilesystem) -> None:
        logger = create_logger(log_file="/logs/gitline.log")

        logger.warning("unknown_status_letter", letter="X")

        record = json.loads(Path("/logs/gitline.log").read_text().splitlines()[0])
        assert record["event"] == "unknown_status_letter"
        assert record["letter"] == "X"
        assert record["level"] == "warning"
        assert "timestamp" in record

    def test_text_format(self, fs: FakeFilesystem) -> None:
        logger = create_logger(log_file="/logs/gitline.log", log_format="text")

        logger.error("classification_failed", path="/repo")

        content = Path("/logs/gitline.log").read_text()
        assert "classification_failed" in content
        assert "path=/repo" in content

    def test_level_threshold(self, fs: FakeFilesystem) -> None:
        logger = create_logger(level="error", log_file="/logs/gitline.log")

        logger.warning("dropped")
        logger.error("kept")

        content = Path("/logs/gitline.log").read_text()
        assert "dropped" not in content
        assert "kept" in content

    def test_debug_env_forces_debug(
        self, fs: FakeFilesystem, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITLINE_DEBUG", "1")
        logger = create_logger(level="error", log_file="/logs/gitline.log")

        logger.debug("repo_state_classified", state="Clean")

        assert "repo_state_classified" in Path("/logs/gitline.log").read_text()

    def test_default_log_file(self, fs: FakeFilesystem, mocker: MockerFixture) -> None:
        _ = mocker.patch(
            "gitline.utils._logging.get_default_log_file",
            return_value=Path("/state/gitline/gitline.log"),
        )

        logger = create_logger()
        logger.error("classification_failed")

        assert Path("/state/gitline/gitline.log").exists()

    def test_disabled_writes_nothing(self, fs: FakeFilesystem) -> None:
        logger = create_logger(log_file="/logs/gitline.log", enabled=False)

        logger.error("classification_failed")

        assert not Path("/logs/gitline.log").exists()


class TestLogLevelFromString:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("nonsense", logging.WARNING),
        ],
    )
    def test_names(self, name: str, expected: int) -> None:
        from gitline.utils._logging import _log_level_from_string

        assert _log_level_from_string(name) == expected

    def test_env_ignored_unless_requested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from gitline.utils._logging import _log_level_from_string

        monkeypatch.setenv("GITLINE_DEBUG", "1")

        assert _log_level_from_string("error") == logging.ERROR
        assert _log_level_from_string("error", respect_env=True) == logging.DEBUG


class TestNullLogger:
    def test_discards_events(self) -> None:
        logger = create_null_logger()

        assert logger.error("anything", key="value") is None
        assert logger.debug("anything") is None
