"""Playback control and click-to-seek on top of an external audio player.

WHY: Highlighting follows the audio. The audio player itself (decoding,
output device) is an external capability; what this project owns is the
glue: loading the file, copying the player's position into the
transcript state, and turning a clicked word into a seek.

HOW: AudioPlayer is a structural Protocol any backend can satisfy.
PlaybackController drives it: play/pause/toggle/seek, tick() to sample
the position (every 0.1s by default), and follow(), an
asyncio loop that ticks until playback stops.

RULES:
- Player load failures surface as AudioDecodeFailed
- Seeking updates the state immediately, even while paused
- tick() returns False once the player reports it is no longer playing
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from transcribe_audio.config import PLAYBACK_TICK_S
from transcribe_audio.core.ir import WordToken
from transcribe_audio.core.state import TranscriptState
from transcribe_audio.errors import AudioDecodeFailed

logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    """The audio playback capability the controller needs."""

    def load(self, path: Path) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, time: float) -> None: ...

    @property
    def current_time(self) -> float: ...

    @property
    def is_playing(self) -> bool: ...


class PlaybackController:
    """Connects an AudioPlayer to a TranscriptState."""

    def __init__(
        self,
        player: AudioPlayer,
        state: TranscriptState,
        tick_interval: float = PLAYBACK_TICK_S,
    ) -> None:
        self._player = player
        self._state = state
        self._tick_interval = tick_interval
        self._audio_path: Optional[Path] = None

    @property
    def is_playing(self) -> bool:
        return self._player.is_playing

    @property
    def audio_path(self) -> Optional[Path]:
        return self._audio_path

    def configure(self, audio_path: Path, tokens: Sequence[WordToken]) -> None:
        """Load ``audio_path`` into the player and install ``tokens`` in the state.

        RULES:
        - Any player error while loading is raised as AudioDecodeFailed
        - The tokens are installed only after the audio loaded
        """
        audio_path = Path(audio_path)
        try:
            self._player.load(audio_path)
        except AudioDecodeFailed:
            raise
        except Exception as exc:
            raise AudioDecodeFailed(
                "Failed to load audio {}: {}".format(audio_path.name, exc)
            ) from exc
        self._audio_path = audio_path
        self._state.replace_tokens(tokens)
        self._state.set_playback_time(0.0)
        logger.info("Configured playback for %s (%d tokens)", audio_path.name, len(tokens))

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()
        self.tick()

    def toggle(self) -> None:
        if self._player.is_playing:
            self.pause()
        else:
            self.play()

    def seek(self, time: float) -> None:
        self._player.seek(time)
        self._state.set_playback_time(time)

    def seek_to_token(self, key: int) -> WordToken:
        """Seek to the start of the token with ``key`` (KeyError if unknown)."""
        token = self._state.token(key)
        self.seek(token.start)
        return token

    def tick(self) -> bool:
        """Copy the player's position into the state; True while still playing."""
        self._state.set_playback_time(self._player.current_time)
        return self._player.is_playing

    async def follow(self) -> None:
        """Tick every interval until the player stops."""
        while self.tick():
            await asyncio.sleep(self._tick_interval)
