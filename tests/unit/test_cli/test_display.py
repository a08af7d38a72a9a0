"""Tests for cli/display module"""
import pytest
from unittest.mock import MagicMock

from cli.display import display_error, display_header, display_launch_summary
from launcher import build_launch_command
from settings import BootstrapSettings


@pytest.mark.unit
class TestDisplay:

    def test_header(self, console):
        display_header(console)

        assert "Dealer Node - Hytale Server" in console.file.getvalue()

    def test_error_marker_escapes_markup(self, console):
        display_error(console, "bad value [red]x[/red]")

        assert "ERROR bad value [red]x[/red]" in console.file.getvalue()

    def test_launch_summary_lists_command(self):
        console = MagicMock()
        command = build_launch_command(auth_mode="offline")

        display_launch_summary(console, BootstrapSettings(auth_mode="offline"), command)

        printed = " ".join(str(call) for call in console.print.call_args_list)
        assert "Auth Mode: offline" in printed
        assert "--disable-sentry" in printed
