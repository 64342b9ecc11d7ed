"""Tests for logging configuration."""

from pathlib import Path
from unittest.mock import patch

from employee_api.core.logging import LOG_FILE_NAME, LOG_FORMAT, setup_logging


class TestSetupLogging:
    def test_adds_console_sinks(self) -> None:
        with patch("employee_api.core.logging.logger") as mock_logger:
            setup_logging("debug")
        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_count == 2
        assert mock_logger.add.call_args_list[0].kwargs["level"] == "DEBUG"

    def test_reference_id_defaults_outside_jobs(self) -> None:
        with patch("employee_api.core.logging.logger") as mock_logger:
            setup_logging()
        mock_logger.configure.assert_called_once_with(extra={"reference_id": "-"})
        assert "{extra[reference_id]}" in LOG_FORMAT

    def test_adds_file_sink_when_log_dir_set(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        with patch("employee_api.core.logging.logger") as mock_logger:
            setup_logging("INFO", log_dir=str(log_dir))
        assert log_dir.is_dir()
        assert mock_logger.add.call_count == 3
        file_call = mock_logger.add.call_args_list[2]
        assert file_call.args[0] == log_dir / LOG_FILE_NAME
        assert file_call.kwargs["rotation"] == "24h"
