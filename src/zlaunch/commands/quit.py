"""Stop the daemon."""

import typer

from zlaunch.app_context import use_context
from zlaunch.daemon.protocol import Quit


def quit_(ctx: typer.Context) -> None:
    """Stop the daemon."""
    app = use_context(ctx)
    app.send(Quit())
    app.out.print_quit()
