"""Unit tests for all formatter modules.

WHY: Each formatter turns the same Transcript IR into a file a person or a
renderer reads. A wrong sentence break, a missing line or a schema drift
would only show up downstream, so each output is checked here.

HOW: Tests run each formatter against the hand-checked sample transcript
from conftest.py:
  - Plain text: synthesized prose with a trailing newline
  - Display lines: schema-valid JSON, rows as wrapped by the synthesizer
  - Word timings: one "start<TAB>raw text" line per token

RULES:
- Schema validation uses display_lines_schema.json shipped in the package.
- Expected values come from conftest.py, never from the code under test.
"""

import json
from pathlib import Path

import jsonschema
import pytest

from transcribe_audio.core.ir import Transcript
from transcribe_audio.formatters import FORMATTERS
from transcribe_audio.formatters.base import BaseFormatter
from transcribe_audio.formatters.display_lines import DisplayLinesFormatter, build_document
from transcribe_audio.formatters.plain_text import PlainTextFormatter
from transcribe_audio.formatters.word_timings import WordTimingsFormatter

SCHEMA_PATH = (
    Path(__file__).resolve().parent.parent
    / "transcribe_audio" / "formatters" / "display_lines_schema.json"
)


def _load_schema():
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def empty_transcript():
    return Transcript.from_tokens([], "silence.wav")


class TestPlainTextFormatter:

    def test_content(self, sample_transcript, sample_text):
        (output,) = PlainTextFormatter().format(sample_transcript)
        assert output.content == sample_text + "\n"

    def test_gap_threshold_is_used(self, sample_transcript):
        (output,) = PlainTextFormatter(gap_threshold_s=10.0).format(sample_transcript)
        assert output.content == "The meeting starts at nine can you come.\n"

    def test_empty_transcript(self, empty_transcript):
        (output,) = PlainTextFormatter().format(empty_transcript)
        assert output.content == ""

    def test_output_suffix_and_media_type(self, sample_transcript):
        (output,) = PlainTextFormatter().format(sample_transcript)
        assert output.suffix == "-transcript.txt"
        assert output.media_type == "text/plain"


class TestDisplayLinesFormatter:

    def test_schema_validation(self, sample_transcript):
        (output,) = DisplayLinesFormatter(max_chars=20).format(sample_transcript)
        jsonschema.validate(json.loads(output.content), _load_schema())

    def test_rows(self, sample_transcript):
        (output,) = DisplayLinesFormatter(max_chars=20).format(sample_transcript)
        data = json.loads(output.content)
        assert [line["text"] for line in data["lines"]] == [
            "The meeting starts",
            "at nine. Can? You",
            "come.",
        ]
        assert [line["index"] for line in data["lines"]] == [0, 1, 2]
        assert data["lines"][1]["start"] == pytest.approx(1.20)

    def test_token_entries(self, sample_transcript):
        (output,) = DisplayLinesFormatter(max_chars=20).format(sample_transcript)
        data = json.loads(output.content)
        nine = data["lines"][1]["tokens"][1]
        assert nine == {
            "key": 4,
            "text": "nine",
            "display": "nine.",
            "start": pytest.approx(1.35),
            "duration": pytest.approx(0.40),
        }

    def test_every_token_once_in_order(self, sample_transcript):
        document = build_document(sample_transcript, max_chars=20, gap_threshold_s=0.6)
        keys = [t["key"] for line in document["lines"] for t in line["tokens"]]
        assert keys == list(range(8))

    def test_metadata(self, sample_transcript):
        document = build_document(sample_transcript, max_chars=20, gap_threshold_s=0.6)
        assert document["version"] == "1.0.0"
        assert document["source"] == "meeting.wav"
        assert document["duration"] == pytest.approx(4.15)
        assert document["max_chars"] == 20

    def test_empty_transcript(self, empty_transcript):
        (output,) = DisplayLinesFormatter().format(empty_transcript)
        assert json.loads(output.content)["lines"] == []

    def test_output_suffix_and_media_type(self, sample_transcript):
        (output,) = DisplayLinesFormatter().format(sample_transcript)
        assert output.suffix == "-lines.json"
        assert output.media_type == "application/json"
        assert output.content.endswith("\n")


class TestWordTimingsFormatter:

    def test_content(self, sample_transcript):
        (output,) = WordTimingsFormatter().format(sample_transcript)
        lines = output.content.splitlines()
        assert lines[0] == "0.00s\tthe"
        assert lines[4] == "1.35s\tnine"
        assert lines[-1] == "3.85s\tcome"
        assert len(lines) == 8

    def test_raw_text_not_display_text(self, sample_transcript):
        (output,) = WordTimingsFormatter().format(sample_transcript)
        assert "nine." not in output.content
        assert "Can?" not in output.content

    def test_empty_transcript(self, empty_transcript):
        (output,) = WordTimingsFormatter().format(empty_transcript)
        assert output.content == ""
        assert output.suffix == "-words.txt"


class TestRegistry:

    def test_keys(self):
        assert set(FORMATTERS) == {"plain_text", "display_lines", "word_timings"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_entries_are_formatter_classes(self, key, sample_transcript):
        formatter = FORMATTERS[key](gap_threshold_s=0.6, max_chars=20)
        assert isinstance(formatter, BaseFormatter)
        outputs = formatter.format(sample_transcript)
        assert outputs and outputs[0].suffix == formatter.suffix
