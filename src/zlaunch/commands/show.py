"""Show the launcher."""

from typing import Annotated

import typer

from zlaunch.app_context import AppContext, use_context
from zlaunch.daemon.protocol import Show
from zlaunch.modes import LauncherMode

ModeOption = Annotated[
    list[str] | None,
    typer.Option("--mode", "-m", help="Mode to open with (repeatable), e.g. apps, emoji, calc, windows."),
]


def parse_mode_options(app: AppContext, values: list[str] | None) -> tuple[LauncherMode, ...] | None:
    """Parse --mode values, exiting with an error on an unknown name."""
    if not values:
        return None
    modes: list[LauncherMode] = []
    for value in values:
        mode = LauncherMode.parse(value)
        if mode is None:
            app.out.print_error_and_exit("invalid_request", f"Unknown mode: {value}")
        modes.append(mode)
    return tuple(modes)


def show(ctx: typer.Context, mode: ModeOption = None) -> None:
    """Show the launcher window."""
    app = use_context(ctx)
    app.send(Show(modes=parse_mode_options(app, mode)))
    app.out.print_window_command("show")
