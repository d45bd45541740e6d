"""Pick the compositor backend once at startup."""

import logging
from collections.abc import Callable

from zlaunch.compositor.base import Compositor
from zlaunch.compositor.hyprland import HyprlandCompositor
from zlaunch.compositor.kwin import KWinCompositor
from zlaunch.compositor.niri import NiriCompositor
from zlaunch.compositor.noop import NoopCompositor

logger = logging.getLogger(__name__)

# First match wins
DETECTORS: list[Callable[[], Compositor | None]] = [
    HyprlandCompositor.detect,
    NiriCompositor.detect,
    KWinCompositor.detect,
]


def detect_compositor(detectors: list[Callable[[], Compositor | None]] | None = None) -> Compositor:
    """Return the first detected backend, or the no-op backend."""
    for detector in DETECTORS if detectors is None else detectors:
        compositor = detector()
        if compositor is not None:
            logger.info("Detected %s compositor", compositor.name)
            return compositor
    logger.warning("No supported compositor detected, window switching disabled")
    return NoopCompositor()
