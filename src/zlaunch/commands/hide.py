"""Hide the launcher."""

import typer

from zlaunch.app_context import use_context
from zlaunch.daemon.protocol import Hide


def hide(ctx: typer.Context) -> None:
    """Hide the launcher window."""
    app = use_context(ctx)
    app.send(Hide())
    app.out.print_window_command("hide")
