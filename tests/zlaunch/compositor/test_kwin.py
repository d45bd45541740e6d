"""Tests for the KWin backend with a scripted kdotool."""

import pytest

from zlaunch.compositor.kwin import KWinCompositor, run_tool
from zlaunch.errors import CompositorError

KDOTOOL = {
    ("search", ".*"): "{aaa}\n{bbb}\n{ccc}\n",
    ("getactivewindow",): "{bbb}\n",
    ("getwindowclassname", "{aaa}"): "org.kde.dolphin\n",
    ("getwindowclassname", "{bbb}"): "konsole\n",
    ("getwindowclassname", "{ccc}"): "zlaunch\n",
    ("get_desktop_for_window", "{aaa}"): "0\n",
    ("get_desktop_for_window", "{bbb}"): "2\n",
    ("get_desktop_for_window", "{ccc}"): "0\n",
    ("getwindowname", "{aaa}"): "Home - Dolphin\n",
    ("getwindowname", "{bbb}"): "\n",
    ("getwindowname", "{ccc}"): "zlaunch\n",
}


class FakeRunner:
    """Answers kdotool invocations from a table; anything else fails."""

    def __init__(self, table: dict[tuple[str, ...], str], failing: frozenset[str] = frozenset()) -> None:
        self.table = table
        self.failing = failing
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> str:
        self.calls.append(args)
        if args[0] == "kdotool" and args[1] not in self.failing and tuple(args[1:]) in self.table:
            return self.table[tuple(args[1:])]
        if args[0] == "qdbus":
            return ""
        raise CompositorError(f"{args[0]} exited with status 1")


class TestListWindows:
    """Window data assembled from kdotool queries."""

    def test_windows(self):
        """Desktops are 1-based, the active window is focused, empty titles show the class."""
        windows = KWinCompositor(FakeRunner(KDOTOOL)).list_windows()
        assert [(w.address, w.title, w.class_name, w.workspace, w.focused) for w in windows] == [
            ("{aaa}", "Home - Dolphin", "org.kde.dolphin", 1, False),
            ("{bbb}", "konsole", "konsole", 3, True),
        ]

    def test_no_active_window(self):
        """A failing getactivewindow leaves every window unfocused."""
        runner = FakeRunner(KDOTOOL, failing=frozenset({"getactivewindow"}))
        assert not any(w.focused for w in KWinCompositor(runner).list_windows())

    def test_search_failure_propagates(self):
        """Without a window list the query fails."""
        runner = FakeRunner(KDOTOOL, failing=frozenset({"search"}))
        with pytest.raises(CompositorError):
            KWinCompositor(runner).list_windows()


class TestFocus:
    """windowactivate with the qdbus fallback."""

    def test_kdotool_activate(self):
        """kdotool is tried first."""
        runner = FakeRunner({("windowactivate", "{aaa}"): ""})
        KWinCompositor(runner).focus_window("{aaa}")
        assert runner.calls == [["kdotool", "windowactivate", "{aaa}"]]

    def test_qdbus_fallback(self):
        """When kdotool fails the KRunner windows runner is used."""
        runner = FakeRunner({})
        KWinCompositor(runner).focus_window("{aaa}")
        assert runner.calls[-1] == ["qdbus", "org.kde.KWin", "/WindowsRunner", "org.kde.krunner1.Run", "0_{aaa}", ""]


class TestDetect:
    """Session variable plus D-Bus check."""

    def test_requires_kde_session(self, monkeypatch):
        """Outside KDE the D-Bus check is never run."""
        monkeypatch.delenv("KDE_SESSION_VERSION", raising=False)
        assert KWinCompositor.detect(kwin_available=lambda: pytest.fail("D-Bus checked")) is None

    def test_requires_kwin_on_dbus(self, monkeypatch):
        """A KDE session without a reachable KWin is not KWin."""
        monkeypatch.setenv("KDE_SESSION_VERSION", "6")
        assert KWinCompositor.detect(kwin_available=lambda: False) is None
        assert isinstance(KWinCompositor.detect(kwin_available=lambda: True), KWinCompositor)


class TestRunTool:
    """Subprocess wrapper."""

    def test_missing_binary(self):
        """A missing executable is a compositor error."""
        with pytest.raises(CompositorError, match="not found"):
            run_tool(["zlaunch-definitely-missing-tool"])

    def test_nonzero_exit(self):
        """A failing tool is a compositor error."""
        with pytest.raises(CompositorError, match="status"):
            run_tool(["false"])

    def test_stdout(self):
        """Stdout is returned as text."""
        assert run_tool(["echo", "hello"]) == "hello\n"
