"""Playback domain - audio previews over MPV.

This domain handles:
- MPV player integration via JSON IPC
- One-at-a-time preview coordination
"""

# Player integration
from .player import (
    PlayerState,
    check_mpv_available,
    start_mpv,
    stop_mpv,
    is_mpv_running,
    send_mpv_command,
    get_mpv_property,
    play_url,
    pause_playback,
    is_playback_finished,
)

# Previews
from .preview import (
    AudioBackend,
    AudioPreview,
    MpvBackend,
    PlaybackCoordinator,
    normalize_dropbox_url,
)

__all__ = [
    # Player
    "PlayerState",
    "check_mpv_available",
    "start_mpv",
    "stop_mpv",
    "is_mpv_running",
    "send_mpv_command",
    "get_mpv_property",
    "play_url",
    "pause_playback",
    "is_playback_finished",
    # Previews
    "AudioBackend",
    "AudioPreview",
    "MpvBackend",
    "PlaybackCoordinator",
    "normalize_dropbox_url",
]
