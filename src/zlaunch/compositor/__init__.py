"""Compositor clients: window listing and focusing per compositor."""

from zlaunch.compositor.base import Compositor as Compositor
from zlaunch.compositor.base import CompositorCapabilities as CompositorCapabilities
from zlaunch.compositor.base import WindowInfo as WindowInfo
from zlaunch.compositor.detect import detect_compositor as detect_compositor
