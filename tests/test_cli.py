"""Tests for the command-line interface."""

from unittest.mock import patch

from typer.testing import CliRunner

from chat_relay.settings import app_settings
from cli import typer_app

runner = CliRunner()


def test_settings_command_lists_configuration():
    result = runner.invoke(typer_app, ["settings"])

    assert result.exit_code == 0
    assert "CHAT_PATH" in result.output
    assert "WS_OUTBOX_MAX_SIZE" in result.output


def test_serve_command_runs_factory():
    """Test serve starts uvicorn with the application factory."""
    with patch("cli.uvicorn.run") as mock_run:
        result = runner.invoke(typer_app, ["serve", "--port", "4100"])

    assert result.exit_code == 0
    mock_run.assert_called_once_with(
        "chat_relay:application",
        factory=True,
        host=app_settings.HOST,
        port=4100,
        reload=False,
    )
