"""Show daemon status."""

import typer

from zlaunch.app_context import use_context
from zlaunch.daemon.client import is_daemon_running
from zlaunch.daemon.protocol import GetTheme


def status(ctx: typer.Context) -> None:
    """Show whether the daemon is running and its active theme."""
    app = use_context(ctx)
    endpoint = app.cfg.endpoint
    if not is_daemon_running(endpoint):
        app.out.print_status(running=False, endpoint=str(endpoint), theme=None)
        return
    resp = app.send(GetTheme())
    app.out.print_status(running=True, endpoint=str(endpoint), theme=str(resp.data["theme"]))
