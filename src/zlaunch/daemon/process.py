"""Daemon process management: the restart supervisor for platforms without exec."""

import logging
import subprocess  # nosec B404
import sys
from collections.abc import Callable, Sequence

from zlaunch.daemon.reload import DAEMON_ARGV, RELOAD_EXIT_CODE

logger = logging.getLogger(__name__)

CHILD_ARGV: tuple[str, ...] = (*DAEMON_ARGV, "daemon")


def _run_child(argv: Sequence[str]) -> int:
    # S603: argv is our own interpreter and module
    return subprocess.call(list(argv))  # noqa: S603  # nosec B603


def supervise(argv: Sequence[str] = CHILD_ARGV, run: Callable[[Sequence[str]], int] = _run_child) -> int:
    """Run the daemon as a child and start it again whenever it exits for a reload.

    Returns the first exit code that is not a reload request.
    """
    while True:
        code = run(argv)
        if code != RELOAD_EXIT_CODE:
            return code
        logger.info("Daemon exited for reload, starting a new one")


def uses_supervisor() -> bool:
    """True on platforms where the daemon cannot replace its own process image."""
    return sys.platform == "win32"
