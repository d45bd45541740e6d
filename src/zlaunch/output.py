"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201 - print() is how CLI output is produced.

import json
import sys
from typing import NoReturn

import typer


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str | None) -> None:
        """Print a success result in JSON or human-readable format. No message means silent in text mode."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        elif message:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Window ---

    def print_window_command(self, command: str) -> None:
        """Print acknowledgement of show/hide/toggle. Silent in text mode."""
        self._success({"command": command}, None)

    # --- Daemon ---

    def print_quit(self) -> None:
        """Print daemon stop confirmation."""
        self._success({}, "Daemon stopped.")

    def print_reloading(self) -> None:
        """Print reload confirmation."""
        self._success({}, "Daemon reloading.")

    def print_status(self, *, running: bool, endpoint: str, theme: str | None) -> None:
        """Print daemon status."""
        text = f"Daemon: {'running' if running else 'stopped'} ({endpoint})"
        if theme is not None:
            text += f", theme: {theme}"
        self._success({"running": running, "endpoint": endpoint, "theme": theme}, text + ".")

    # --- Themes ---

    def print_theme(self, name: str) -> None:
        """Print the active theme name."""
        self._success({"theme": name}, name)

    def print_theme_set(self, name: str) -> None:
        """Print theme change confirmation."""
        self._success({"theme": name}, f"Theme set to '{name}'.")

    def print_themes(self, themes: list[dict[str, object]], current: str | None) -> None:
        """Print available themes, marking the active one."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"themes": themes, "current": current}}))
            return
        for theme in themes:
            marker = "*" if theme["name"] == current else " "
            source = "bundled" if theme["bundled"] else "user"
            print(f"{marker} {theme['name']} ({source})")
