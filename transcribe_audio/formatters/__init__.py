"""Output formatter registry: pluggable format hub.

WHY: The CLI and the HTTP API need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate with their synthesis settings:
``formatter = FORMATTERS["plain_text"](gap_threshold_s=0.6)``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from transcribe_audio.formatters.display_lines import DisplayLinesFormatter
from transcribe_audio.formatters.plain_text import PlainTextFormatter
from transcribe_audio.formatters.word_timings import WordTimingsFormatter

if TYPE_CHECKING:
    from transcribe_audio.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "plain_text": PlainTextFormatter,
    "display_lines": DisplayLinesFormatter,
    "word_timings": WordTimingsFormatter,
}
