"""Tests for the mtext-layout command-line interface."""

import json
import logging

import pytest

from mtext_layout.cli import create_parser, main


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("mtext_layout")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def font_file(tmp_path):
    box = [[[0, 0], [0, 1], [1, 1], [1, 0], [0, 0]]]
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({
        "name": "unit",
        "height": 1,
        "glyphs": {char: {"advance": 1, "strokes": box} for char in "abcd12?"},
    }))
    return path


class TestCli:
    """Test suite for the command-line entry point."""

    def test_parser_defaults(self):
        """Test default arguments."""
        args = create_parser().parse_args(["abc"])

        assert args.text == "abc"
        assert args.font == []
        assert args.attachment == 1
        assert args.log_level == "WARNING"

    def test_render_to_pdf(self, tmp_path, font_file, capsys):
        """Test a PDF preview is written for the given markup."""
        output = tmp_path / "out.pdf"

        code = main(["{\\C1;ab}\\P\\S1/2;", "--font", str(font_file), "-o", str(output), "--width", "10"])

        assert code == 0
        assert output.read_bytes().startswith(b"%PDF")
        assert str(output) in capsys.readouterr().out

    def test_configures_logging(self, tmp_path, font_file):
        """Test the log level and log file options configure the package logger."""
        log_file = tmp_path / "layout.log"

        main(["a\\fArial;b", "--font", str(font_file), "-o", str(tmp_path / "out.pdf"),
              "--log-level", "DEBUG", "--log-file", str(log_file)])

        assert logging.getLogger("mtext_layout").level == logging.DEBUG
        assert "missing fonts: Arial" in log_file.read_text()

    def test_font_error_exit_code(self, tmp_path, capsys):
        """Test an unreadable font is reported on stderr with exit code 1."""
        code = main(["a", "--font", str(tmp_path / "missing.ttf"), "-o", str(tmp_path / "out.pdf")])

        assert code == 1
        assert "Error" in capsys.readouterr().err
