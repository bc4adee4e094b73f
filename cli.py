"""
CLI tool for running and inspecting the chat relay.

Provides commands for starting the server and viewing the effective
configuration.
"""

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chat_relay.settings import app_settings

# Initialize Typer app with help text
typer_app = typer.Typer(
    name="chat-relay",
    help="Chat relay CLI - Run the WebSocket chat server",
    add_completion=False,
)
console = Console()


@typer_app.command(name="serve")
def serve(
    host: str = typer.Option(
        app_settings.HOST, "--host", help="Bind address"
    ),
    port: int = typer.Option(app_settings.PORT, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(
        False, "--reload", help="Restart the server on code changes"
    ),
):
    """
    Start the chat relay server.

    Example:
        python cli.py serve --port 3000
    """
    console.print(
        Panel.fit(
            f"[bold cyan]Chat relay[/bold cyan] listening on "
            f"[green]ws://{host}:{port}{app_settings.CHAT_PATH}[/green]",
            border_style="cyan",
        )
    )
    uvicorn.run(
        "chat_relay:application",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@typer_app.command(name="settings")
def show_settings():
    """
    Display the effective configuration as a table.

    Values come from environment variables, falling back to defaults.

    Example:
        CHAT_PATH=/ws python cli.py settings
    """
    table = Table("Setting", "Value", title="Chat relay settings", show_lines=True)

    for name, value in app_settings.model_dump().items():
        table.add_row(f"[cyan]{name}[/cyan]", repr(value))

    console.print()
    console.print(table)
    console.print()


if __name__ == "__main__":
    typer_app()
