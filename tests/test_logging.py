"""Tests for logging configuration."""

import logging
from pathlib import Path

import pytest


def _record(message: str, level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name="pbs_editor.test",
        level=level,
        pathname=__file__,
        lineno=12,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestFormatters:
    """Test the console and file formatters."""

    def test_colored_formatter_colours_level_once(self) -> None:
        from pbs_editor.utils.logging_config import ColoredFormatter

        formatter = ColoredFormatter(fmt="%(levelname)s %(message)s")
        text = formatter.format(_record("INFO message", logging.INFO))

        assert text.startswith("\033[32mINFO\033[0m")
        assert text.endswith("INFO message")

    def test_csv_formatter_escapes_quotes(self) -> None:
        from pbs_editor.utils.logging_config import CSVFormatter

        text = CSVFormatter().format(_record('Saved "items.txt"'))
        fields = text.split(";")

        assert fields[1].strip() == "INFO"
        assert fields[3] == '"pbs_editor.test"'
        assert fields[4] == '"12"'
        assert fields[5] == '"Saved ""items.txt"""'


class TestSetupLogging:
    """Test setup_logging against settings."""

    def test_console_handler(self, settings_file: Path) -> None:
        from pbs_editor.settings import AppSettings
        from pbs_editor.utils.logging_config import ColoredFormatter, setup_logging

        setup_logging(AppSettings(ini_file=settings_file))

        root = logging.getLogger()
        assert logging.getLogger("pbs_editor").level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].level == logging.INFO
        assert isinstance(root.handlers[0].formatter, ColoredFormatter)

    def test_level_override_and_plain_output(self, settings_file: Path) -> None:
        from pbs_editor.settings import AppSettings
        from pbs_editor.utils.logging_config import ColoredFormatter, setup_logging

        settings = AppSettings(ini_file=settings_file)
        settings.console_use_colors = False
        setup_logging(settings, console_level="DEBUG")

        handler = logging.getLogger().handlers[0]
        assert handler.level == logging.DEBUG
        assert not isinstance(handler.formatter, ColoredFormatter)

    def test_console_disabled(self, settings_file: Path) -> None:
        from pbs_editor.settings import AppSettings
        from pbs_editor.utils.logging_config import setup_logging

        settings = AppSettings(ini_file=settings_file)
        settings.console_logging = False
        setup_logging(settings)

        assert logging.getLogger().handlers == []

    def test_file_logging(
        self, settings_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from pbs_editor.settings import AppSettings
        from pbs_editor.utils.logging_config import setup_logging

        monkeypatch.chdir(tmp_path)
        settings = AppSettings(ini_file=settings_file)
        settings.file_logging = True
        setup_logging(settings)

        logging.getLogger("pbs_editor.test").warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_text = (tmp_path / "logs" / "pbs_editor.csv").read_text(encoding="utf-8")
        assert '"written to file"' in log_text
