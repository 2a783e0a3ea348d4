"""Intermediate representation dataclasses for word-timed transcripts.

WHY: Recognizers hand back word tokens in many shapes (Soniox sub-words,
Vosk results, saved JSON). The synthesizer, the state container and every
formatter need one well-typed form with stable identity, so edits and UI
diffing can track a word even when two words have the same text.

HOW: Four dataclasses:
  WordToken    - one recognized word with timing and a stable key
  DisplayToken - a WordToken paired with its formatted display string
  DisplayLine  - the display tokens assigned to one visual row
  Transcript   - the full token sequence plus source metadata

RULES:
- All times are float seconds from the start of the audio
- WordToken.key is assigned once (by make_tokens, or from a process-wide
  counter when a token is built directly) and survives edits
- WordToken is frozen; edits produce a new token via dataclasses.replace
- Tokens are never mutated by the core
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

# Starts above any position make_tokens hands out
_next_key = itertools.count(1 << 32).__next__


@dataclass(frozen=True)
class WordToken:
    """A single recognized word and its timing.

    WHY: The recognizer's output unit. Identity matters more than content:
    "the" may appear a hundred times, and each occurrence must be
    individually addressable for editing, highlighting and seeking.

    RULES:
    - text: raw word as recognized (no added punctuation, arbitrary case)
    - start: seconds from the beginning of the audio
    - duration: seconds the word spans
    - key: opaque stable identifier, unique within one sequence; when
      omitted, the next value of a process-wide counter is used
    """

    text: str
    start: float
    duration: float
    key: int = field(default_factory=_next_key)

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True)
class DisplayToken:
    """A token together with the string shown for it on screen."""

    token: WordToken
    text: str

    @property
    def start(self) -> float:
        return self.token.start

    @property
    def end(self) -> float:
        return self.token.end


@dataclass
class DisplayLine:
    """One visual row of display tokens.

    RULES:
    - char_count is the wrapping budget used (raw text + one space per token)
    - tokens is never empty for lines produced by build_display_lines
    """

    tokens: List[DisplayToken] = field(default_factory=list)
    char_count: int = 0

    @property
    def text(self) -> str:
        return " ".join(t.text for t in self.tokens)

    @property
    def start(self) -> float:
        return self.tokens[0].start if self.tokens else 0.0


@dataclass
class Transcript:
    """The complete token sequence handed to formatters.

    RULES:
    - tokens: ordered by start time, keys unique
    - source_filename: original audio or token-file name (for output naming)
    - duration_s: end of the last token, 0.0 when empty
    """

    tokens: List[WordToken]
    source_filename: str
    duration_s: float = 0.0

    @classmethod
    def from_tokens(cls, tokens: Sequence[WordToken], source_filename: str) -> Transcript:
        duration_s = tokens[-1].end if tokens else 0.0
        return cls(tokens=list(tokens), source_filename=source_filename, duration_s=duration_s)


def make_tokens(triples: Iterable[Tuple[str, float, float]]) -> List[WordToken]:
    """Build a keyed token sequence from ``(text, start, duration)`` triples.

    WHY: The external recognizer produces plain triples. Keys are assigned
    here, at construction time, so every later stage can address a token
    without relying on object identity.

    HOW: Enumerates the triples and uses the position as the key.

    RULES:
    - key == position in the input
    - start and duration are coerced to float
    """
    return [
        WordToken(text=text, start=float(start), duration=float(duration), key=i)
        for i, (text, start, duration) in enumerate(triples)
    ]
