"""User settings loaded from config.toml, shared by the daemon components."""

import logging
import threading
import tomllib
from collections.abc import Callable
from pathlib import Path

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from zlaunch.modes import DEFAULT_MODES, LauncherMode

logger = logging.getLogger(__name__)

DEFAULT_THEME = "default"


class Settings(BaseModel):
    """Launcher settings. Unknown keys in the file are ignored but preserved on save."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    theme: str = Field(default=DEFAULT_THEME, min_length=1, description="Name of the active theme")
    window_width: float = Field(default=600.0, gt=0, description="Window width in pixels")
    window_height: float = Field(default=400.0, gt=0, description="Window height in pixels")
    hyprland_auto_blur: bool = Field(default=True, description="Apply blur layer rules on Hyprland at startup")
    enable_transparency: bool = Field(default=True, description="Render the launcher window translucent")
    default_modes: list[str] | None = Field(default=None, description="Modes a Show opens with when none are requested")

    def effective_modes(self) -> tuple[LauncherMode, ...]:
        """Return the configured default modes, skipping unknown names. Falls back to combined."""
        if not self.default_modes:
            return DEFAULT_MODES
        modes = tuple(m for m in (LauncherMode.parse(name) for name in self.default_modes) if m is not None)
        return modes or DEFAULT_MODES

    def warnings(self) -> list[str]:
        """Return non-fatal validation warnings for values outside the usable range."""
        result: list[str] = []
        if self.window_width < 300:
            result.append(f"window_width: {self.window_width} is below minimum (300)")
        elif self.window_width > 2000:
            result.append(f"window_width: {self.window_width} exceeds maximum (2000)")
        if self.window_height < 200:
            result.append(f"window_height: {self.window_height} is below minimum (200)")
        elif self.window_height > 1500:
            result.append(f"window_height: {self.window_height} exceeds maximum (1500)")
        for name in self.default_modes or []:
            if LauncherMode.parse(name) is None:
                result.append(f"default_modes: unknown mode '{name}'")
        return result


def load_settings(path: Path) -> Settings:
    """Load settings from a TOML file.

    A missing file yields defaults. An unreadable or invalid file logs a warning and yields defaults.
    """
    if not path.is_file():
        logger.debug("Config file not found at %s, using defaults", path)
        return Settings()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
        settings = Settings.model_validate(data)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Failed to load config file %s, using defaults: %s", path, e)
        return Settings()
    logger.info("Loaded config from %s", path)
    for warning in settings.warnings():
        logger.warning("Config validation: %s", warning)
    return settings


class SettingsStore:
    """Thread-safe holder of the current settings with persist-if-exists semantics."""

    def __init__(self, path: Path, settings: Settings | None = None) -> None:
        """Initialize the store.

        Args:
            path: Location of config.toml.
            settings: Initial settings (loaded from path when omitted).

        """
        self._path = path
        self._lock = threading.Lock()
        self._settings = settings if settings is not None else load_settings(path)

    @property
    def path(self) -> Path:
        """Location of config.toml."""
        return self._path

    def get(self) -> Settings:
        """Return a snapshot of the current settings."""
        with self._lock:
            return self._settings

    def update(self, change: Callable[[Settings], Settings]) -> Settings:
        """Apply a change, then persist it if the config file already exists.

        Persist failures are logged; the in-memory update is kept.
        """
        with self._lock:
            self._settings = change(self._settings)
            if self._path.is_file():
                try:
                    self._save()
                except (OSError, tomllib.TOMLDecodeError) as e:
                    logger.warning("Failed to save config to %s: %s", self._path, e)
            return self._settings

    def set_theme(self, name: str) -> Settings:
        """Set the active theme name."""
        return self.update(lambda s: s.model_copy(update={"theme": name}))

    def _save(self) -> None:
        """Write current values over the file, keeping keys this model does not know."""
        with self._path.open("rb") as f:
            data = tomllib.load(f)
        data.update(self._settings.model_dump(exclude_none=True))
        self._path.write_text(tomli_w.dumps(data))
        logger.debug("Saved config to %s", self._path)
