"""Tests for Rich Console factory and theme."""

from io import StringIO

from cmdsrv.output.console import create_console, get_output, style_for_status


class TestCreateConsole:
    def test_returns_console_with_stringio(self) -> None:
        console = create_console()
        assert isinstance(console.file, StringIO)

    def test_no_color_disables_ansi(self) -> None:
        console = create_console(no_color=True)
        console.print("[cmdsrv.error]boom[/cmdsrv.error]")
        output = get_output(console)
        assert "\x1b" not in output
        assert "boom" in output

    def test_default_width(self) -> None:
        assert create_console().width == 120

    def test_custom_width(self) -> None:
        assert create_console(width=80).width == 80


def test_empty_console() -> None:
    assert get_output(create_console()) == ""


def test_style_for_status() -> None:
    assert style_for_status("ok") == "cmdsrv.ok"
    assert style_for_status("error") == "cmdsrv.error"
    assert style_for_status("other") == ""
