"""Tests for the Rich console factory."""

from easel.output.console import EASEL_THEME, create_console, get_output


class TestCreateConsole:
    def test_renders_into_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("[easel.ok]OK[/]: done")
        assert get_output(console) == "OK: done\n"

    def test_theme_styles_defined(self) -> None:
        for name in ("easel.ok", "easel.error", "easel.warning", "easel.op", "easel.id"):
            assert name in EASEL_THEME.styles

    def test_width_default_and_override(self) -> None:
        assert create_console().width == 120
        assert create_console(width=60).width == 60
