"""Launcher modes: the view a Show or Toggle opens the launcher with."""

from enum import StrEnum


class LauncherMode(StrEnum):
    """Initial launcher view."""

    COMBINED = "combined"
    APPLICATIONS = "applications"
    AI = "ai"
    EMOJIS = "emojis"
    CALCULATOR = "calculator"
    CLIPBOARD = "clipboard"
    ACTIONS = "actions"
    SEARCH = "search"
    THEMES = "themes"
    WINDOWS = "windows"

    @staticmethod
    def parse(value: str) -> "LauncherMode | None":
        """Parse a mode name or alias, case-insensitively. Return None if unknown."""
        key = value.strip().lower()
        return _ALIASES.get(key) or next((mode for mode in LauncherMode if mode.value == key), None)


_ALIASES: dict[str, LauncherMode] = {
    "apps": LauncherMode.APPLICATIONS,
    "app": LauncherMode.APPLICATIONS,
    "emoji": LauncherMode.EMOJIS,
    "calc": LauncherMode.CALCULATOR,
    "action": LauncherMode.ACTIONS,
    "theme": LauncherMode.THEMES,
    "window": LauncherMode.WINDOWS,
}

DEFAULT_MODES: tuple[LauncherMode, ...] = (LauncherMode.COMBINED,)
