"""
MPV preview player driven over JSON IPC.

Functional approach with explicit state: every call takes a PlayerState and
returns a new one. Previews are streamed from their URL, nothing is
downloaded.
"""

import json
import os
import shutil
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, NamedTuple, Optional

from loguru import logger

from song_catalog.core.config import PlayerConfig

SOCKET_TIMEOUT = 2.0
STARTUP_TIMEOUT = 5.0


class PlayerState(NamedTuple):
    """Immutable player state."""

    socket_path: Optional[str] = None
    process: Optional[subprocess.Popen] = None
    current_url: Optional[str] = None
    is_playing: bool = False


def check_mpv_available() -> bool:
    """True if an mpv executable is on PATH."""
    return shutil.which("mpv") is not None


def default_socket_path() -> str:
    return str(Path(tempfile.gettempdir()) / f"mpv-song-catalog-{os.getpid()}")


def _ipc_request(socket_path: Optional[str], command: list) -> Optional[dict]:
    """Send one command and return mpv's first reply line (None on failure)."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    payload = (json.dumps({"command": command}) + "\n").encode("utf-8")
    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(SOCKET_TIMEOUT)
            sock.connect(socket_path)
            sock.sendall(payload)
            reply = sock.recv(4096).decode("utf-8").strip()
    except OSError as e:
        logger.debug(f"mpv IPC {command[0]} failed: {e}")
        return None

    if not reply:
        return {}
    try:
        return json.loads(reply.splitlines()[0])
    except json.JSONDecodeError:
        logger.debug(f"mpv IPC {command[0]}: unparseable reply {reply!r}")
        return None


def send_mpv_command(socket_path: Optional[str], *command: Any) -> bool:
    """Run an mpv command, e.g. ``send_mpv_command(path, "loadfile", url)``."""
    reply = _ipc_request(socket_path, list(command))
    if reply is None:
        return False
    # An empty reply means mpv accepted the command without answering
    return not reply or reply.get("error") == "success"


def get_mpv_property(socket_path: Optional[str], name: str) -> Any:
    reply = _ipc_request(socket_path, ["get_property", name])
    if reply and reply.get("error") == "success":
        return reply.get("data")
    return None


def _wait_for_socket(socket_path: str, process: subprocess.Popen) -> bool:
    deadline = time.monotonic() + STARTUP_TIMEOUT
    while not os.path.exists(socket_path):
        if process.poll() is not None or time.monotonic() > deadline:
            return False
        time.sleep(0.1)
    return True


def start_mpv(config: PlayerConfig) -> Optional[PlayerState]:
    """Launch an idle, audio-only mpv listening on its IPC socket."""
    socket_path = config.mpv_socket_path or default_socket_path()
    if os.path.exists(socket_path):
        os.unlink(socket_path)

    cmd = [
        "mpv",
        "--idle=yes",
        "--no-video",
        "--no-terminal",
        "--keep-open=yes",
        "--load-scripts=no",
        f"--volume={config.volume}",
        f"--input-ipc-server={socket_path}",
    ]
    logger.info(f"Starting mpv for previews (socket {socket_path})")

    try:
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        logger.error(f"Failed to start mpv: {e}")
        return None

    if not _wait_for_socket(socket_path, process) or get_mpv_property(socket_path, "idle-active") is None:
        logger.error("mpv did not open its IPC socket")
        process.kill()
        return None

    return PlayerState(socket_path=socket_path, process=process)


def stop_mpv(state: PlayerState) -> None:
    """Terminate mpv and remove its socket."""
    if state.process and state.process.poll() is None:
        state.process.kill()
        try:
            state.process.wait(timeout=SOCKET_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.warning(f"mpv (pid {state.process.pid}) did not exit")

    if state.socket_path and os.path.exists(state.socket_path):
        try:
            os.unlink(state.socket_path)
        except OSError as e:
            logger.debug(f"Could not remove mpv socket: {e}")


def is_mpv_running(state: PlayerState) -> bool:
    return (
        state.process is not None
        and state.process.poll() is None
        and bool(state.socket_path)
        and os.path.exists(state.socket_path)
    )


def play_url(state: PlayerState, url: str) -> tuple[PlayerState, bool]:
    """Replace whatever is loaded with url and unpause."""
    if not is_mpv_running(state):
        return state, False
    if not send_mpv_command(state.socket_path, "loadfile", url, "replace"):
        logger.warning(f"mpv refused to load {url}")
        return state, False

    send_mpv_command(state.socket_path, "set_property", "pause", False)
    logger.info(f"Previewing {url}")
    return state._replace(current_url=url, is_playing=True), True


def pause_playback(state: PlayerState) -> tuple[PlayerState, bool]:
    if not is_mpv_running(state):
        return state, False
    if not send_mpv_command(state.socket_path, "set_property", "pause", True):
        return state, False
    return state._replace(is_playing=False), True


def is_playback_finished(state: PlayerState) -> bool:
    """True once the loaded stream reached its end (or mpv is gone)."""
    if not is_mpv_running(state):
        return True
    return bool(get_mpv_property(state.socket_path, "eof-reached"))
