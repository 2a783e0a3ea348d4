"""Recognizer interface and helpers for incremental results.

WHY: Speech recognition is an external capability. Some backends report
partial results while they work; only the last result is authoritative.
Callers should not have to know which kind of backend they hold.

HOW: A Recognizer exposes ``batches(path)``, an async generator of
"result so far" token batches. ``recognize(path)`` drains it with
last_batch() and returns only the final batch, which is then handed to
the synthesizer fresh, never patched incrementally.

RULES:
- Every batch is a complete, keyed token sequence (not a delta)
- The final batch wins; earlier batches are only good for progress
- A recognizer that yields nothing produced an empty transcript
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, List, Sequence

from transcribe_audio.core.ir import WordToken


class Recognizer(ABC):
    """Abstract base for all recognizers.

    To add a backend:
    1. Create a module in recognizers/
    2. Subclass Recognizer and implement ``name`` and ``batches``
    3. Raise the error kinds from transcribe_audio.errors on failure
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name, e.g. 'Soniox'."""

    @abstractmethod
    def batches(self, path: Path) -> AsyncIterator[List[WordToken]]:
        """Yield result-so-far token batches for the file at ``path``."""

    async def recognize(self, path: Path) -> List[WordToken]:
        """Run recognition to completion and return the final batch."""
        return await last_batch(self.batches(path))


async def last_batch(batches: AsyncIterable[List[WordToken]]) -> List[WordToken]:
    """Consume a batch stream and return its last batch ([] if none)."""
    final: List[WordToken] = []
    async for batch in batches:
        final = batch
    return final


def recognition_progress(batch: Sequence[WordToken], audio_duration: float) -> float:
    """Fraction of the audio covered by a partial batch, clamped to [0, 1].

    Uses the start of the last recognized word, the same measure a progress
    bar shows. Unknown or zero duration → 0.0.
    """
    if not batch or audio_duration <= 0:
        return 0.0
    return max(0.0, min(batch[-1].start / audio_duration, 1.0))
