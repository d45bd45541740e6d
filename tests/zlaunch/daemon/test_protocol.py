"""Tests for CLI-daemon protocol encoding/decoding."""

import json

import pytest

from zlaunch.daemon.protocol import (
    GetTheme,
    Hide,
    ListThemes,
    Quit,
    Reload,
    Response,
    SetTheme,
    Show,
    Toggle,
    decode_command,
    decode_response,
    encode_command,
    encode_response,
)
from zlaunch.errors import ProtocolError
from zlaunch.modes import LauncherMode


class TestResponseBuilders:
    """Response.success() and Response.fail() static methods."""

    def test_success_no_data(self):
        """Success response with no data."""
        resp = Response.success()
        assert resp.ok is True
        assert resp.data == {}

    def test_fail(self):
        """Error response has ok=False plus error and message."""
        resp = Response.fail("theme_not_found", "Theme 'x' not found")
        assert resp.ok is False
        assert resp.error == "theme_not_found"
        assert resp.message == "Theme 'x' not found"


class TestCommandEncoding:
    """encode_command / decode_command."""

    @pytest.mark.parametrize(
        "command",
        [
            Show(),
            Show(modes=(LauncherMode.APPLICATIONS, LauncherMode.EMOJIS)),
            Hide(),
            Toggle(modes=(LauncherMode.WINDOWS,)),
            Quit(),
            SetTheme(theme="nord"),
            Reload(),
            ListThemes(),
            GetTheme(),
        ],
    )
    def test_round_trip(self, command):
        """Every command survives encoding."""
        assert decode_command(encode_command(command)) == command

    def test_wire_shape(self):
        """SetTheme carries its name under params."""
        obj = json.loads(encode_command(SetTheme(theme="nord")))
        assert obj == {"command": "set_theme", "params": {"name": "nord"}}

    def test_newline_terminated(self):
        """Encoded bytes end with exactly one newline."""
        encoded = encode_command(Hide())
        assert encoded.endswith(b"\n")
        assert encoded.count(b"\n") == 1

    def test_missing_params(self):
        """Missing params key means no parameters."""
        assert decode_command(b'{"command": "show"}') == Show()

    def test_mode_aliases_accepted(self):
        """Mode aliases decode to canonical modes."""
        cmd = decode_command(b'{"command": "toggle", "params": {"modes": ["apps"]}}')
        assert cmd == Toggle(modes=(LauncherMode.APPLICATIONS,))


class TestDecodeCommandErrors:
    """Malformed requests raise ProtocolError."""

    @pytest.mark.parametrize(
        "data",
        [
            b"not json",
            b"\xff\xfe",
            b"[]",
            b'"show"',
            b'{"params": {}}',
            b'{"command": 5}',
            b'{"command": "launch_missiles"}',
            b'{"command": "show", "params": []}',
            b'{"command": "show", "params": {"modes": "apps"}}',
            b'{"command": "show", "params": {"modes": ["nope"]}}',
            b'{"command": "set_theme"}',
            b'{"command": "set_theme", "params": {"name": 3}}',
        ],
    )
    def test_rejected(self, data):
        """Each malformed payload is rejected with invalid_request."""
        with pytest.raises(ProtocolError) as exc_info:
            decode_command(data)
        assert exc_info.value.code == "invalid_request"


class TestResponseEncoding:
    """encode_response / decode_response."""

    def test_error_round_trip(self):
        """Error response round-trips correctly."""
        resp = Response.fail("compositor", "boom")
        assert decode_response(encode_response(resp)) == resp

    def test_success_json_excludes_error_fields(self):
        """Success response JSON omits error and message keys."""
        obj = json.loads(encode_response(Response.success({"theme": "nord"})))
        assert obj == {"ok": True, "data": {"theme": "nord"}}

    def test_decode_garbage(self):
        """An empty or non-response reply raises ProtocolError."""
        with pytest.raises(ProtocolError):
            decode_response(b"")
        with pytest.raises(ProtocolError):
            decode_response(b'{"data": {}}')
