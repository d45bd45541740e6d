"""Centralized application configuration: directories and derived paths."""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

from zlaunch.daemon.endpoint import Endpoint

APP_NAME = "zlaunch"


def _env_dir(name: str, default: Path) -> Path:
    """Return the directory named by an environment variable, or the default when unset or empty."""
    value = os.environ.get(name)
    return Path(value) if value else default


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    config_dir: Path = Field(description="Directory holding config.toml and user themes")
    runtime_dir: Path = Field(description="Directory holding the IPC socket")
    state_dir: Path = Field(description="Directory holding log files")
    data_dirs: tuple[Path, ...] = Field(default=(), description="XDG data directories scanned for applications")

    @computed_field(description="Optional TOML settings file")
    @property
    def config_path(self) -> Path:
        """Optional TOML settings file."""
        return self.config_dir / "config.toml"

    @computed_field(description="User theme directory")
    @property
    def themes_dir(self) -> Path:
        """User theme directory."""
        return self.config_dir / "themes"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.state_dir / f"{APP_NAME}.log"

    @computed_field(description="Directories watched for desktop entries")
    @property
    def applications_dirs(self) -> list[Path]:
        """Directories watched for desktop entries."""
        return [d / "applications" for d in self.data_dirs]

    @property
    def endpoint(self) -> Endpoint:
        """Well-known IPC endpoint of the daemon."""
        return Endpoint.default(self.runtime_dir, APP_NAME)

    @staticmethod
    def build() -> "Config":
        """Build a Config from the XDG environment variables."""
        home = Path.home()
        data_home = _env_dir("XDG_DATA_HOME", home / ".local" / "share")
        system_dirs = [Path(p) for p in os.environ.get("XDG_DATA_DIRS", "/usr/local/share:/usr/share").split(":") if p]
        return Config(
            config_dir=_env_dir("XDG_CONFIG_HOME", home / ".config") / APP_NAME,
            runtime_dir=_env_dir("XDG_RUNTIME_DIR", Path("/tmp")),  # noqa: S108
            state_dir=_env_dir("XDG_STATE_HOME", home / ".local" / "state") / APP_NAME,
            data_dirs=(data_home, *system_dirs),
        )
