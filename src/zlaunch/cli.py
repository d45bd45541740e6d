"""CLI entry point for zlaunch."""

from typing import Annotated

import typer
from mm_clikit import TyperPlus

from zlaunch.app_context import AppContext
from zlaunch.commands.daemon import daemon, start
from zlaunch.commands.hide import hide
from zlaunch.commands.quit import quit_
from zlaunch.commands.reload import reload
from zlaunch.commands.show import show
from zlaunch.commands.status import status
from zlaunch.commands.theme import theme_app
from zlaunch.commands.toggle import toggle
from zlaunch.config import Config
from zlaunch.log import setup_logging
from zlaunch.output import Output

app = TyperPlus(package_name="zlaunch")

# Commands that run the daemon in this process and log to stderr as well
_DAEMON_COMMANDS = (None, "daemon")


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
) -> None:
    """Desktop launcher daemon. Run without a command to start the daemon."""
    cfg = Config.build()
    setup_logging(cfg.log_path, console=ctx.invoked_subcommand in _DAEMON_COMMANDS)
    ctx.obj = AppContext(out=Output(json_mode=json_output), cfg=cfg)
    if ctx.invoked_subcommand is None:
        start(ctx.obj)


# Daemon
app.command(hidden=True)(daemon)
app.command("quit")(quit_)
app.command()(reload)
app.command(aliases=["s"])(status)

# Window
app.command()(show)
app.command()(hide)
app.command(aliases=["t"])(toggle)

# Themes
app.add_typer(theme_app, name="theme")
