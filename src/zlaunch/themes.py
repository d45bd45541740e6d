"""Theme discovery and validation: the implicit default, bundled themes and user themes."""

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from zlaunch.errors import ThemeNotFoundError
from zlaunch.settings import DEFAULT_THEME

logger = logging.getLogger(__name__)

BUNDLED_THEMES_DIR = Path(__file__).parent / "assets" / "themes"

_COLOR = r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$"


@dataclass(frozen=True)
class ThemeInfo:
    """A theme name and where it comes from."""

    name: str
    is_bundled: bool


class Theme(BaseModel):
    """Launcher colors and geometry. Missing keys take the default theme's values."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = DEFAULT_THEME
    window_background: str = Field(default="#0f0f0fb3", pattern=_COLOR)
    window_border: str = Field(default="#ffffff18", pattern=_COLOR)
    window_border_radius: float = Field(default=12.0, ge=0)
    item_background_selected: str = Field(default="#ffffff12", pattern=_COLOR)
    item_title_color: str = Field(default="#ffffffe6", pattern=_COLOR)
    item_description_color: str = Field(default="#ffffff66", pattern=_COLOR)
    section_header_color: str = Field(default="#ffffff80", pattern=_COLOR)
    accent_color: str = Field(default="#7aa2f7", pattern=_COLOR)
    item_border_radius: float = Field(default=6.0, ge=0)
    icon_size: float = Field(default=24.0, gt=0)


class ThemeCatalog:
    """Resolves theme names against bundled themes first, then the user themes directory."""

    def __init__(self, user_dir: Path, bundled_dir: Path = BUNDLED_THEMES_DIR) -> None:
        """Initialize the catalog.

        Args:
            user_dir: Directory holding user ``<name>.toml`` themes.
            bundled_dir: Directory holding themes shipped with the package.

        """
        self._user_dir = user_dir
        self._bundled_dir = bundled_dir

    def load(self, name: str) -> Theme:
        """Load a theme by name.

        Raises:
            ThemeNotFoundError: No loadable theme has that name.

        """
        if name == DEFAULT_THEME:
            return Theme()
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise ThemeNotFoundError(name)
        for path in (self._bundled_dir / f"{name}.toml", self._user_dir / f"{name}.toml"):
            if not path.is_file():
                continue
            try:
                with path.open("rb") as f:
                    data = tomllib.load(f)
                theme = Theme.model_validate({**data, "name": name})
            except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
                logger.warning("Failed to load theme '%s' from %s: %s", name, path, e)
                continue
            logger.debug("Loaded theme '%s' from %s", name, path)
            return theme
        raise ThemeNotFoundError(name)

    def exists(self, name: str) -> bool:
        """Check whether a theme name resolves to a loadable theme."""
        try:
            self.load(name)
        except ThemeNotFoundError:
            return False
        return True

    def available(self) -> list[ThemeInfo]:
        """List available themes sorted by name. Bundled names shadow user themes."""
        themes: dict[str, ThemeInfo] = {DEFAULT_THEME: ThemeInfo(DEFAULT_THEME, is_bundled=True)}
        for path in _toml_files(self._bundled_dir):
            themes.setdefault(path.stem, ThemeInfo(path.stem, is_bundled=True))
        for path in _toml_files(self._user_dir):
            themes.setdefault(path.stem, ThemeInfo(path.stem, is_bundled=False))
        return sorted(themes.values(), key=lambda t: t.name)


def _toml_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return [p for p in directory.iterdir() if p.suffix == ".toml" and p.is_file()]
