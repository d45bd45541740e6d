"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from zlaunch.config import Config
from zlaunch.daemon.client import DaemonClient
from zlaunch.daemon.protocol import Command, Response
from zlaunch.errors import ZlaunchError
from zlaunch.output import Output


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    def send(self, command: Command) -> Response:
        """Send a command to the daemon, exiting with an error message on any failure."""
        try:
            resp = DaemonClient(self.cfg.endpoint).send(command)
        except ZlaunchError as e:
            self.out.print_error_and_exit(e.code, str(e))
        if not resp.ok:
            self.out.print_error_and_exit(resp.error, resp.message)
        return resp


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
