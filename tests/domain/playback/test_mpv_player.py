"""Tests for the mpv IPC helpers (socket mocked)."""

import json
from unittest.mock import MagicMock, patch

from song_catalog.domain.playback import player
from song_catalog.domain.playback.player import PlayerState


def _fake_socket(reply: bytes):
    sock = MagicMock()
    sock.__enter__.return_value = sock
    sock.recv.return_value = reply
    return sock


def test_send_command_success():
    sock = _fake_socket(b'{"error": "success"}\n')
    with patch.object(player.os.path, "exists", return_value=True), \
            patch.object(player.socket, "socket", return_value=sock):
        assert player.send_mpv_command("/tmp/mpv", "loadfile", "a.mp3", "replace")

    sent = json.loads(sock.sendall.call_args[0][0].decode("utf-8"))
    assert sent == {"command": ["loadfile", "a.mp3", "replace"]}


def test_send_command_error_reply():
    sock = _fake_socket(b'{"error": "invalid parameter"}\n')
    with patch.object(player.os.path, "exists", return_value=True), \
            patch.object(player.socket, "socket", return_value=sock):
        assert not player.send_mpv_command("/tmp/mpv", "loadfile", "")


def test_send_command_without_socket():
    assert not player.send_mpv_command(None, "stop")


def test_get_property():
    sock = _fake_socket(b'{"data": true, "error": "success"}\n')
    with patch.object(player.os.path, "exists", return_value=True), \
            patch.object(player.socket, "socket", return_value=sock):
        assert player.get_mpv_property("/tmp/mpv", "eof-reached") is True


def test_connection_refused_returns_none():
    sock = _fake_socket(b"")
    sock.connect.side_effect = ConnectionRefusedError()
    with patch.object(player.os.path, "exists", return_value=True), \
            patch.object(player.socket, "socket", return_value=sock):
        assert player.get_mpv_property("/tmp/mpv", "pause") is None


def test_play_url_requires_running_player():
    state, ok = player.play_url(PlayerState(), "a.mp3")

    assert not ok
    assert state.current_url is None


def test_finished_when_not_running():
    assert player.is_playback_finished(PlayerState())
