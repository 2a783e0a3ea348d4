"""Soniox sub-word token assembly into word tokens.

WHY: Soniox uses BPE tokenization, splitting words like "fantastic" into
[" fan", "tastic"], and emits punctuation as separate tokens. The
synthesizer expects one token per word, with any punctuation the
recognizer produced attached to the word it follows.

HOW: A leading space in token.text signals a new word boundary.
Continuation tokens (no leading space) are appended to the current word.
Punctuation-only tokens are appended to the current word, which is then
closed, so the token after them always starts a new word.

RULES:
- Leading space → new word (strip the space from output text)
- No leading space + open word → continuation (extend end_ms)
- Punctuation-only token → merged onto the preceding word; dropped if none
- First token in array → new word (even without leading space)
- Translation tokens (translation_status="translation") are skipped
- Timestamps: ms → seconds; keys assigned by position
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from transcribe_audio.core.ir import WordToken, make_tokens

# Regex matching tokens that consist entirely of punctuation characters.
_PUNCTUATION_RE = re.compile(r"^[.,!?;:…—–\-]+$")


def filter_translation_tokens(tokens: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Remove translation tokens, which have no audio alignment."""
    return [
        t for t in tokens
        if t.get("translation_status", "none") != "translation"
    ]


def assemble_soniox_tokens(tokens: List[Dict[str, Any]]) -> List[WordToken]:
    """Assemble Soniox sub-word token dicts into keyed word tokens.

    Args:
        tokens: Flat list of Soniox token dicts (text, start_ms, end_ms, ...).

    Returns:
        Ordered WordTokens, one per spoken word.
    """
    words: List[Tuple[str, float, float]] = []

    current_text: Optional[str] = None
    current_start_ms = 0
    current_end_ms = 0

    def _flush_current() -> None:
        nonlocal current_text
        if current_text is not None:
            words.append((
                current_text,
                current_start_ms / 1000.0,
                (current_end_ms - current_start_ms) / 1000.0,
            ))
            current_text = None

    for token in filter_translation_tokens(tokens):
        text: str = token["text"]
        if token.get("start_ms") is None or token.get("end_ms") is None:
            continue
        start_ms: int = token["start_ms"]
        end_ms: int = token["end_ms"]

        stripped = text.strip()
        if _PUNCTUATION_RE.match(stripped):
            if current_text is not None:
                current_text += stripped
                _flush_current()
            elif words:
                text_so_far, start_s, duration_s = words[-1]
                words[-1] = (text_so_far + stripped, start_s, duration_s)
            continue

        if text.startswith(" ") or current_text is None:
            _flush_current()
            current_text = text.lstrip(" ")
            current_start_ms = start_ms
            current_end_ms = end_ms
        else:
            current_text += text
            current_end_ms = end_ms

    _flush_current()

    return make_tokens(words)
