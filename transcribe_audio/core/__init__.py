"""Core IR, synthesis and state modules.

WHY: The core package holds the stable heart of the project: the token
dataclasses and the synthesis algorithm. Everything else (recognizers,
formatters, CLI, HTTP API) is built around it.

HOW: ir.py defines the data structures, synthesizer.py derives text,
display strings, lines and lookups from them, state.py wraps a token
sequence in an observable container.

RULES:
- Nothing in core performs IO or raises collaborator errors
- IR dataclasses are the contract; change with care
"""

from transcribe_audio.core.ir import (
    DisplayLine,
    DisplayToken,
    Transcript,
    WordToken,
    make_tokens,
)
from transcribe_audio.core.state import TranscriptState
from transcribe_audio.core.synthesizer import (
    build_display_lines,
    display_texts,
    find_timing_issues,
    format_for_display,
    highlight,
    max_chars_for_width,
    synthesize,
    token_active_at,
    token_at_position,
    wrap_into_lines,
)

__all__ = [
    "DisplayLine",
    "DisplayToken",
    "Transcript",
    "TranscriptState",
    "WordToken",
    "build_display_lines",
    "display_texts",
    "find_timing_issues",
    "format_for_display",
    "highlight",
    "make_tokens",
    "max_chars_for_width",
    "synthesize",
    "token_active_at",
    "token_at_position",
    "wrap_into_lines",
]
