"""Toggle launcher visibility."""

import typer

from zlaunch.app_context import use_context
from zlaunch.commands.show import ModeOption, parse_mode_options
from zlaunch.daemon.protocol import Toggle


def toggle(ctx: typer.Context, mode: ModeOption = None) -> None:
    """Show the launcher if hidden, hide it if visible."""
    app = use_context(ctx)
    app.send(Toggle(modes=parse_mode_options(app, mode)))
    app.out.print_window_command("toggle")
