"""Reload: release the endpoint and restart the daemon with fresh code and config."""

import logging
import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from zlaunch.daemon.endpoint import Endpoint

logger = logging.getLogger(__name__)

# Exit status a supervised daemon uses to ask its supervisor for a restart (EX_TEMPFAIL)
RELOAD_EXIT_CODE = 75

DAEMON_ARGV: tuple[str, ...] = (sys.executable, "-m", "zlaunch")


class RestartStrategy(ABC):
    """How the daemon process restarts itself once the event loop has returned."""

    @abstractmethod
    def restart(self, endpoint: Endpoint) -> int:
        """Restart. Return the exit code for the current process, or never return."""


class ExecRestart(RestartStrategy):
    """Replace the process image in place (POSIX)."""

    def __init__(self, argv: Sequence[str] = DAEMON_ARGV, execv: Callable[[str, Sequence[str]], object] = os.execv) -> None:
        """Initialize with the command line of the new image."""
        self._argv = list(argv)
        self._execv = execv

    def restart(self, endpoint: Endpoint) -> int:
        """Exec the new image. Returns only by raising.

        Raises:
            OSError: exec failed.

        """
        # Normally gone already; a leftover file would make the new process connect to a dead socket
        endpoint.remove()
        logger.info("Reloading: exec %s", " ".join(self._argv))
        for handler in logging.getLogger("zlaunch").handlers:
            handler.flush()
        self._execv(self._argv[0], self._argv)
        msg = "exec returned"
        raise OSError(msg)


class SupervisedRestart(RestartStrategy):
    """Exit with RELOAD_EXIT_CODE and let the supervising process start a fresh daemon (Windows)."""

    def restart(self, endpoint: Endpoint) -> int:
        """Release the endpoint and return the reload exit code."""
        endpoint.remove()
        logger.info("Reloading: exiting with %d for the supervisor", RELOAD_EXIT_CODE)
        return RELOAD_EXIT_CODE


def default_strategy() -> RestartStrategy:
    """Pick the platform's restart strategy."""
    if sys.platform == "win32":
        return SupervisedRestart()
    return ExecRestart()


class ReloadController:
    """Performs the reload after the event loop set its reload flag."""

    def __init__(self, endpoint: Endpoint, strategy: RestartStrategy | None = None) -> None:
        """Initialize with the endpoint to release and an optional strategy override."""
        self._endpoint = endpoint
        self._strategy = strategy if strategy is not None else default_strategy()

    @property
    def strategy(self) -> RestartStrategy:
        """Active restart strategy."""
        return self._strategy

    def exec_reload(self) -> int:
        """Restart the daemon.

        Raises:
            OSError: The process image could not be replaced.

        """
        return self._strategy.restart(self._endpoint)
