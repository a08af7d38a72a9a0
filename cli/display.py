"""Console output for the bootstrap CLI"""

from rich.markup import escape

from constants import BIND_ADDRESS


def display_header(console):
    """Display the startup banner"""
    console.print("=" * 68)
    console.print("    Dealer Node - Hytale Server", style="bold")
    console.print("=" * 68)


def display_launch_summary(console, settings, command):
    """
    Display what is about to be started

    Args:
        console: Rich console for output
        settings: BootstrapSettings in effect
        command: The LaunchCommand that will replace this process
    """
    console.print("Starting Hytale Server...", style="bold green")
    console.print(f" Server Name: {escape(str(settings.server_name))}")
    console.print(f" Max Players: {settings.max_players}")
    console.print(f" Auth Mode: {escape(str(settings.auth_mode))}")
    console.print(f" Bind: {BIND_ADDRESS}")
    console.print(f" Command: {escape(command.display())}", style="dim")
    console.print("-" * 68)


def display_error(console, message: str):
    """Display a fatal error with a distinguishing marker"""
    console.print(f"[bold red]ERROR[/bold red] {escape(message)}")
