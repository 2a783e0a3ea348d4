"""Word timing list formatter: one timed word per line.

WHY: Correcting a transcript means finding the misrecognized word and
its place in the audio. The editor view lists every word next to its
start time; this formatter writes that list to a file.

HOW: One line per token: start time with two decimals and an "s", a tab,
then the raw token text (no display punctuation, since edits apply to
the raw text).

RULES:
- Line format: "{start:.2f}s\\t{text}"
- Raw text, in token order; empty transcript → ""
- Output suffix: "-words.txt"
"""

from __future__ import annotations

from typing import List

from transcribe_audio.core.ir import Transcript
from transcribe_audio.formatters.base import BaseFormatter, FormatterOutput


class WordTimingsFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Word Timings"

    @property
    def suffix(self) -> str:
        return "-words.txt"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        lines = [
            "{:.2f}s\t{}".format(token.start, token.text)
            for token in transcript.tokens
        ]
        content = "\n".join(lines)
        if content:
            content += "\n"
        return [FormatterOutput(suffix=self.suffix, content=content, media_type="text/plain")]
