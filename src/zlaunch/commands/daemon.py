"""Daemon commands: start it in the foreground, or run it under a supervisor."""

import typer

from zlaunch.app_context import AppContext, use_context
from zlaunch.daemon.client import is_daemon_running
from zlaunch.daemon.process import supervise, uses_supervisor
from zlaunch.daemon.reload import SupervisedRestart
from zlaunch.daemon.runtime import run_daemon


def start(app: AppContext) -> None:
    """Start the daemon in the foreground. Exits 0 silently if one is already running.

    Raises:
        typer.Exit: Always, with the daemon's exit code.

    """
    if is_daemon_running(app.cfg.endpoint):
        raise typer.Exit(code=0)
    code = supervise() if uses_supervisor() else run_daemon(app.cfg)
    raise typer.Exit(code=code)


def daemon(ctx: typer.Context) -> None:
    """Run the daemon process. Not intended for manual use."""
    app = use_context(ctx)
    restart = SupervisedRestart() if uses_supervisor() else None
    raise typer.Exit(code=run_daemon(app.cfg, restart))
