"""Theme commands: show, list and switch the launcher theme."""

from typing import cast

import typer

from zlaunch.app_context import use_context
from zlaunch.daemon.protocol import GetTheme, ListThemes, SetTheme

theme_app = typer.Typer(help="Show or change the launcher theme.", no_args_is_help=False)


@theme_app.callback(invoke_without_command=True)
def theme(ctx: typer.Context) -> None:
    """Show the active theme."""
    if ctx.invoked_subcommand is not None:
        return
    app = use_context(ctx)
    resp = app.send(GetTheme())
    app.out.print_theme(str(resp.data["theme"]))


@theme_app.command("list")
def list_(ctx: typer.Context) -> None:
    """List available themes."""
    app = use_context(ctx)
    themes = cast(list[dict[str, object]], app.send(ListThemes()).data["themes"])
    current = str(app.send(GetTheme()).data["theme"])
    app.out.print_themes(themes, current)


@theme_app.command("set")
def set_(ctx: typer.Context, name: str = typer.Argument(help="Theme name")) -> None:
    """Switch to a theme."""
    app = use_context(ctx)
    app.send(SetTheme(theme=name))
    app.out.print_theme_set(name)
