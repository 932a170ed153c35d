"""
Audio previews with a single shared output.

There is one real output device, so at most one preview plays at a time.
Every AudioPreview is handed the same PlaybackCoordinator; starting one
pauses whichever other preview was playing.
"""

from typing import Optional, Protocol

from loguru import logger

from song_catalog.core.config import PlayerConfig

from . import player


def normalize_dropbox_url(url: Optional[str]) -> str:
    """Turn a Dropbox share link into a direct-stream link.

    Examples:
        >>> normalize_dropbox_url("https://www.dropbox.com/s/abc/demo.mp3?dl=0")
        'https://www.dropbox.com/s/abc/demo.mp3?raw=1'
    """
    if not url:
        return ""
    return url.strip().replace("?dl=0", "?raw=1").replace("&dl=0", "&raw=1")


class AudioBackend(Protocol):
    """Something that can play and pause one stream."""

    def play(self, url: str) -> bool: ...

    def pause(self) -> bool: ...

    def is_finished(self) -> bool: ...

    def stop(self) -> None: ...


class MpvBackend:
    """AudioBackend driving an mpv subprocess over JSON IPC (started on first play)."""

    def __init__(self, config: PlayerConfig):
        self.config = config
        self.state: Optional[player.PlayerState] = None

    def play(self, url: str) -> bool:
        if self.state is None or not player.is_mpv_running(self.state):
            self.state = player.start_mpv(self.config)
            if self.state is None:
                return False
        self.state, success = player.play_url(self.state, url)
        return success

    def pause(self) -> bool:
        if self.state is None:
            return False
        self.state, success = player.pause_playback(self.state)
        return success

    def is_finished(self) -> bool:
        return self.state is None or player.is_playback_finished(self.state)

    def stop(self) -> None:
        if self.state is not None:
            player.stop_mpv(self.state)
            self.state = None


class PlaybackCoordinator:
    """Tracks the one preview currently playing."""

    def __init__(self) -> None:
        self._current: Optional["AudioPreview"] = None

    @property
    def current(self) -> Optional["AudioPreview"]:
        return self._current

    def claim(self, preview: "AudioPreview") -> None:
        """Make preview the playing one, pausing any other."""
        previous = self._current
        if previous is not None and previous is not preview and previous.is_playing:
            logger.debug(f"Pausing preview {previous.preview_id} for {preview.preview_id}")
            previous.pause()
        self._current = preview

    def release(self, preview: "AudioPreview") -> None:
        """Forget preview if it is the playing one."""
        if self._current is preview:
            self._current = None


class AudioPreview:
    """A playable preview for one song."""

    def __init__(
        self,
        preview_id: str,
        url: str,
        backend: AudioBackend,
        coordinator: PlaybackCoordinator,
    ):
        self.preview_id = preview_id
        self.url = normalize_dropbox_url(url)
        self.backend = backend
        self.coordinator = coordinator
        self.is_playing = False

    def play(self) -> bool:
        self.coordinator.claim(self)
        if not self.backend.play(self.url):
            logger.warning(f"Could not play preview {self.preview_id}: {self.url}")
            self.coordinator.release(self)
            return False
        self.is_playing = True
        return True

    def pause(self) -> None:
        if self.is_playing:
            self.backend.pause()
            self.is_playing = False
        self.coordinator.release(self)

    def toggle(self) -> bool:
        """Pause if playing, otherwise play; returns the new playing state."""
        if self.is_playing:
            self.pause()
            return False
        return self.play()

    def ended(self) -> None:
        """Playback reached the end of the stream."""
        self.is_playing = False
        self.coordinator.release(self)
