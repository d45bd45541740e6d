"""Daemon subsystem: IPC transport, event loop, reload and process management."""

from zlaunch.daemon.client import DaemonClient as DaemonClient
from zlaunch.daemon.endpoint import Endpoint as Endpoint
from zlaunch.daemon.endpoint import is_daemon_running as is_daemon_running
from zlaunch.daemon.protocol import Response as Response
