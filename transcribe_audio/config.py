"""Configuration constants, question lexicon, and .env loading.

WHY: Centralizes every tunable value (the silence threshold, the wrap
width, the playback tick, the question lexicon) so they are easy to find
and override. They are plain data structures, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level sets, floats and strings, each overridable through an
environment variable. load_api_key() gives a clear error when the
recognizer key is missing.

RULES:
- GAP_THRESHOLD_S is the silence (seconds) that ends a sentence
- QUESTION_WORDS is matched against the lower-cased word before a long gap
- SUPPORTED_AUDIO_FORMATS lists accepted audio file extensions
- API key is loaded from .env via python-dotenv, never hardcoded
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from transcribe_audio.errors import AuthorizationDenied

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}".format(name, raw))


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError("{} must be an integer, got {!r}".format(name, raw))


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------

GAP_THRESHOLD_S = _env_float("TRANSCRIBE_GAP_THRESHOLD", 0.6)
"""Silence between two words (seconds) at or above which a sentence ends."""

QUESTION_WORDS: frozenset[str] = frozenset({
    "who", "what", "when", "where", "why", "how",
    "is", "are", "do", "does", "did",
    "can", "could", "would", "will",
})
"""Words that get "?" instead of "." when they precede a long gap."""

TERMINAL_PUNCTUATION: frozenset[str] = frozenset({".", "!", "?"})

CLAUSE_PUNCTUATION = ",;:—–-"
"""Trailing marks replaced by "." or "?" when a sentence ends on them."""

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

MAX_CHARS_PER_LINE = _env_int("TRANSCRIBE_MAX_CHARS", 90)
MIN_CHARS_PER_LINE = 10
CHAR_WIDTH_PT = 7.0
"""Approximate width of one character in points, for width → chars estimates."""

PLAYBACK_TICK_S = 0.1

# ---------------------------------------------------------------------------
# Recognizer
# ---------------------------------------------------------------------------

SUPPORTED_AUDIO_FORMATS: set[str] = {
    ".aac", ".aiff", ".amr", ".flac", ".m4a",
    ".mp3", ".mp4", ".ogg", ".wav", ".webm",
}
"""Audio file extensions accepted by the recognizer (lowercase, with dot)."""

SONIOX_BASE_URL = os.getenv("SONIOX_BASE_URL", "https://api.soniox.com/v1")
SONIOX_MODEL = os.getenv("SONIOX_MODEL", "stt-async-v4")
DEFAULT_LANGUAGE = os.getenv("TRANSCRIBE_LANGUAGE", "en")

LOG_LEVEL = os.getenv("TRANSCRIBE_LOG_LEVEL", "WARNING").upper()


def load_api_key() -> str:
    """Load the Soniox API key from the environment.

    WHY: The key is required for every recognizer call. Loading it from
    the environment (via .env) keeps it out of source code.

    RULES:
    - Raises AuthorizationDenied if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("SONIOX_API_KEY", "").strip()
    if not key:
        raise AuthorizationDenied(
            "Soniox API key not configured. "
            "Add SONIOX_API_KEY to the .env file in the app folder."
        )
    return key
