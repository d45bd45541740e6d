"""Application-level errors shared by the daemon, the client and the CLI."""


class ZlaunchError(Exception):
    """Base error carrying a machine-readable code next to the message."""

    code = "internal"

    def __init__(self, message: str, code: str | None = None) -> None:
        """Initialize with a human-readable message and an optional code override.

        Args:
            message: Human-readable error description.
            code: Machine-readable error code (defaults to the class code).

        """
        super().__init__(message)
        if code is not None:
            self.code = code


class AlreadyRunningError(ZlaunchError):
    """A live daemon already owns the IPC endpoint."""

    code = "already_running"


class DaemonNotRunningError(ZlaunchError):
    """No daemon answers on the IPC endpoint."""

    code = "not_running"


class ProtocolError(ZlaunchError):
    """A wire message could not be decoded."""

    code = "invalid_request"


class ThemeNotFoundError(ZlaunchError):
    """The requested theme is neither bundled nor in the user themes directory."""

    code = "theme_not_found"

    def __init__(self, name: str) -> None:
        """Initialize with the missing theme name."""
        super().__init__(f"Theme '{name}' not found")
        self.name = name


class CompositorError(ZlaunchError):
    """A compositor backend failed to talk to its compositor."""

    code = "compositor"
