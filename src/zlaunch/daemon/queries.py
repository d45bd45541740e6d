"""Read-only commands answered from settings and themes without touching window state."""

from zlaunch.daemon.protocol import GetTheme, ListThemes, Response
from zlaunch.settings import SettingsStore
from zlaunch.themes import ThemeCatalog


def answer_query(command: ListThemes | GetTheme, settings: SettingsStore, themes: ThemeCatalog) -> Response:
    """Build the response for a theme query."""
    match command:
        case ListThemes():
            return Response.success({"themes": [{"name": t.name, "bundled": t.is_bundled} for t in themes.available()]})
        case GetTheme():
            return Response.success({"theme": settings.get().theme})
