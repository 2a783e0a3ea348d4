"""Display lines JSON formatter: wrapped, timed rows for a playback view.

WHY: A view that highlights words during playback and seeks on click
needs more than prose: it needs the rows, each word's display string,
and each word's timing and key. This formatter hands a renderer all of
that in one document, so it never has to re-run the synthesizer.

HOW: build_display_lines() wraps the tokens and formats each one; the
result is serialized into a versioned JSON document and validated with
jsonschema against display_lines_schema.json before returning.

RULES:
- One entry per DisplayLine, in order, each with at least one token
- Token entries carry key, raw text, display text, start and duration
- Schema validation failure raises jsonschema.ValidationError
- Output suffix: "-lines.json"
- Media type: "application/json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from transcribe_audio.core.ir import DisplayLine, Transcript
from transcribe_audio.core.synthesizer import build_display_lines
from transcribe_audio.formatters.base import BaseFormatter, FormatterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "display_lines_schema.json"

SCHEMA_VERSION = "1.0.0"

_CACHED_SCHEMA: Dict[str, Any] | None = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _line_to_dict(index: int, line: DisplayLine) -> Dict[str, Any]:
    return {
        "index": index,
        "start": line.start,
        "text": line.text,
        "tokens": [
            {
                "key": display.token.key,
                "text": display.token.text,
                "display": display.text,
                "start": display.token.start,
                "duration": display.token.duration,
            }
            for display in line.tokens
        ],
    }


def build_document(
    transcript: Transcript,
    max_chars: int,
    gap_threshold_s: float,
) -> Dict[str, Any]:
    """Build the display-lines document (unvalidated) for a transcript."""
    lines = build_display_lines(transcript.tokens, max_chars, gap_threshold_s)
    return {
        "version": SCHEMA_VERSION,
        "source": transcript.source_filename,
        "duration": transcript.duration_s,
        "max_chars": max_chars,
        "gap_threshold": gap_threshold_s,
        "lines": [_line_to_dict(i, line) for i, line in enumerate(lines)],
    }


class DisplayLinesFormatter(BaseFormatter):
    """Formatter that produces wrapped display lines as JSON."""

    @property
    def name(self) -> str:
        return "Display Lines JSON"

    @property
    def suffix(self) -> str:
        return "-lines.json"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        document = build_document(transcript, self.max_chars, self.gap_threshold_s)
        jsonschema.validate(document, _get_schema())
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=json.dumps(document, ensure_ascii=False, indent=2) + "\n",
                media_type="application/json",
            )
        ]
