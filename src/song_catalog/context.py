"""Application context for explicit state passing.

The AppContext bundles everything a command handler needs, so handlers
take it as their first argument instead of reaching for module globals.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from song_catalog.core.config import Config
from song_catalog.domain.access import Session
from song_catalog.domain.catalog.controller import CatalogController
from song_catalog.domain.playback import AudioBackend, MpvBackend, PlaybackCoordinator


@dataclass
class AppContext:
    """Application context passed to all command handlers.

    Attributes:
        config: Application configuration
        controller: Catalog controller owning the in-memory song list
        console: Rich Console for formatted output
        coordinator: Keeps at most one audio preview playing
        backend: Audio output shared by every preview
        session: Authorized session when the access gate is enabled
    """

    config: Config
    controller: CatalogController
    console: Console
    coordinator: PlaybackCoordinator
    backend: AudioBackend
    session: Optional[Session] = None

    @classmethod
    def create(
        cls,
        config: Config,
        controller: CatalogController,
        console: Console,
        session: Optional[Session] = None,
    ) -> "AppContext":
        """Create the context with a fresh coordinator and mpv backend."""
        return cls(
            config=config,
            controller=controller,
            console=console,
            coordinator=PlaybackCoordinator(),
            backend=MpvBackend(config.player),
            session=session,
        )
