"""Plain text transcript formatter.

WHY: Copying to the clipboard and exporting to a .txt file both need the
transcript as readable prose (sentences, capitals, full stops), not a
list of timed words.

HOW: Runs synthesize() over the transcript tokens with the formatter's
gap threshold and terminates the file with a newline.

RULES:
- Content is exactly synthesize(tokens) + "\\n"; empty transcript → ""
- Output suffix: "-transcript.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from transcribe_audio.core.ir import Transcript
from transcribe_audio.core.synthesizer import synthesize
from transcribe_audio.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces the synthesized transcript as plain text."""

    @property
    def name(self) -> str:
        return "Plain Text"

    @property
    def suffix(self) -> str:
        return "-transcript.txt"

    def format(self, transcript: Transcript) -> List[FormatterOutput]:
        content = synthesize(transcript.tokens, self.gap_threshold_s)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="text/plain",
            )
        ]
