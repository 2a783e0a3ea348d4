"""Observable transcript state shared by views, editors and playback.

WHY: Several consumers depend on the same two facts: the current token
sequence and the current playback position. When either changes, every
dependent view must refresh. Keeping that in one container, decoupled
from rendering, lets the synthesizer stay a pure function.

HOW: TranscriptState holds the tokens, the synthesized text and the
playback time. Listeners subscribe with a callback and receive an event
name plus the state. Replacing or editing tokens re-runs synthesize()
from scratch; moving the playback time only notifies.

RULES:
- Events: "tokens" (sequence replaced or edited), "playback" (time moved)
- Text is regenerated wholesale, never patched
- Listener exceptions propagate to the caller that changed the state
- Timing jitter is logged as a warning, never rejected
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable, List, Optional, Sequence

from transcribe_audio.config import GAP_THRESHOLD_S, MAX_CHARS_PER_LINE
from transcribe_audio.core.ir import DisplayLine, WordToken
from transcribe_audio.core.synthesizer import (
    build_display_lines,
    find_timing_issues,
    synthesize,
    token_active_at,
)

logger = logging.getLogger(__name__)

TOKENS_CHANGED = "tokens"
PLAYBACK_MOVED = "playback"

Listener = Callable[[str, "TranscriptState"], None]


class TranscriptState:
    """Container for the token sequence, its synthesized text and playback time.

    Use ``subscribe`` to be told about changes; it returns a function that
    removes the listener again.
    """

    def __init__(
        self,
        tokens: Sequence[WordToken] = (),
        gap_threshold: float = GAP_THRESHOLD_S,
    ) -> None:
        self._gap_threshold = gap_threshold
        self._listeners: List[Listener] = []
        self._tokens: List[WordToken] = list(tokens)
        self._text = synthesize(self._tokens, gap_threshold)
        self._playback_time = 0.0

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def tokens(self) -> List[WordToken]:
        return list(self._tokens)

    @property
    def text(self) -> str:
        return self._text

    @property
    def playback_time(self) -> float:
        return self._playback_time

    @property
    def gap_threshold(self) -> float:
        return self._gap_threshold

    @property
    def active_token(self) -> Optional[WordToken]:
        return token_active_at(self._tokens, self._playback_time)

    def token(self, key: int) -> WordToken:
        """Return the token with ``key``; raises KeyError if absent."""
        for token in self._tokens:
            if token.key == key:
                return token
        raise KeyError(key)

    def display_lines(self, max_chars_per_line: int = MAX_CHARS_PER_LINE) -> List[DisplayLine]:
        return build_display_lines(self._tokens, max_chars_per_line, self._gap_threshold)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def replace_tokens(self, tokens: Sequence[WordToken]) -> None:
        """Swap in a new token sequence and regenerate the transcript text.

        WHY: Recognition delivers a final batch; edits may replace the
        sequence wholesale. Either way, the text is rebuilt from scratch.
        """
        self._tokens = list(tokens)
        for issue in find_timing_issues(self._tokens):
            logger.warning("Timing issue: %s", issue.message)
        self._text = synthesize(self._tokens, self._gap_threshold)
        logger.debug("Transcript replaced: %d tokens", len(self._tokens))
        self._notify(TOKENS_CHANGED)

    def edit_token(self, key: int, text: str) -> WordToken:
        """Replace one token's text, keeping its key and timing.

        RULES:
        - Raises KeyError when no token has ``key``
        - Returns the new token
        """
        for i, token in enumerate(self._tokens):
            if token.key == key:
                edited = dataclasses.replace(token, text=text)
                tokens = list(self._tokens)
                tokens[i] = edited
                self.replace_tokens(tokens)
                return edited
        raise KeyError(key)

    def set_playback_time(self, time: float) -> None:
        if time == self._playback_time:
            return
        self._playback_time = time
        self._notify(PLAYBACK_MOVED)
