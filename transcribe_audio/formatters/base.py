"""Abstract base formatter and output container.

WHY: Every output format consumes the same Transcript IR but produces
different file content. This base class enforces a consistent interface
so the CLI and the HTTP API can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements, a ``name`` property
and a ``format()`` method. The synthesis settings (gap threshold, line
width) are constructor arguments shared by all formatters.
FormatterOutput is a plain dataclass that bundles a file suffix with its
content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list, one item per output file
- ``suffix`` starts with a hyphen, e.g. ``"-transcript.txt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from transcribe_audio.config import GAP_THRESHOLD_S, MAX_CHARS_PER_LINE
from transcribe_audio.core.ir import Transcript


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-transcript.txt"`` → ``"interview-transcript.txt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/plain"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    def __init__(
        self,
        gap_threshold_s: float = GAP_THRESHOLD_S,
        max_chars: int = MAX_CHARS_PER_LINE,
    ) -> None:
        self.gap_threshold_s = gap_threshold_s
        self.max_chars = max_chars

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """File suffix of the primary output, e.g. '-transcript.txt'."""

    @abstractmethod
    def format(self, transcript: Transcript) -> list[FormatterOutput]:
        """Convert the Transcript IR into one or more output files.

        Args:
            transcript: The complete token sequence with source metadata.

        Returns:
            List of FormatterOutput objects.
        """
