"""Shared test fixtures for the transcribe_audio test suite.

WHY: Most test modules need the same small, hand-checked token sequence.
Centralizing it here keeps expected outputs consistent everywhere.

HOW: SAMPLE_TRIPLES is an eight-word utterance with two long silences,
one after "nine" (statement) and one after "can" (question word).
Expected strings derived from it by hand live next to it.

RULES:
- Short gaps in the sample are 0.05s; long gaps are 0.75s and 0.8s
- Expected values are computed by hand, never by the code under test
"""

from typing import List, Tuple

import pytest

from transcribe_audio.core.ir import Transcript, WordToken, make_tokens


SAMPLE_TRIPLES: List[Tuple[str, float, float]] = [
    ("the",     0.00, 0.30),
    ("meeting", 0.35, 0.40),
    ("starts",  0.80, 0.35),
    ("at",      1.20, 0.10),
    ("nine",    1.35, 0.40),   # ends 1.75, next starts 2.50 → long gap
    ("can",     2.50, 0.30),   # ends 2.80, next starts 3.60 → long gap
    ("you",     3.60, 0.20),
    ("come",    3.85, 0.30),
]

SAMPLE_TEXT = "The meeting starts at nine. Can? You come."

SAMPLE_DISPLAY = ["The", "meeting", "starts", "at", "nine.", "Can?", "You", "come."]


@pytest.fixture
def sample_tokens() -> List[WordToken]:
    return make_tokens(SAMPLE_TRIPLES)


@pytest.fixture
def sample_transcript(sample_tokens) -> Transcript:
    return Transcript.from_tokens(sample_tokens, "meeting.wav")


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_display() -> List[str]:
    return list(SAMPLE_DISPLAY)
