"""Reload the daemon."""

import typer

from zlaunch.app_context import use_context
from zlaunch.daemon.protocol import Reload


def reload(ctx: typer.Context) -> None:
    """Restart the daemon in place, picking up new code and config."""
    app = use_context(ctx)
    app.send(Reload())
    app.out.print_reloading()
