"""Command-line interface for Transcribe Audio.

WHY: Users need a simple way to turn recognizer output (or an audio file)
into a readable transcript and playback-ready lines from the terminal.
The CLI wires the pipeline (recognition, synthesis, pluggable formatter
output and file saving) behind a single command.

HOW: Uses argparse to accept an input file, synthesis options, output
format selection and an output directory. JSON inputs are replayed with
JsonFileRecognizer; audio inputs go through SonioxRecognizer. Runs the
async recognition via asyncio.run(). Status messages go to stderr; output
files are saved next to the input (or to --output-dir).

RULES:
- Positional argument: a .json recognizer result or an audio file
- --formats: comma-separated formatter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-transcript-2.txt)
- --print writes the synthesized text to stdout; --at prints the
  highlighted transcript at a playback time
- Status output goes to stderr (not stdout)
- Exit code 0 on success, 1 on any handled error
"""

from __future__ import annotations

import argparse
import asyncio
import itertools
import logging
import sys
from pathlib import Path
from typing import List, Optional

from transcribe_audio.config import (
    GAP_THRESHOLD_S,
    LOG_LEVEL,
    MAX_CHARS_PER_LINE,
    SUPPORTED_AUDIO_FORMATS,
)
from transcribe_audio.core.ir import Transcript
from transcribe_audio.core.synthesizer import find_timing_issues, highlight, synthesize
from transcribe_audio.errors import FileWriteFailed, TranscribeAudioError
from transcribe_audio.formatters import FORMATTERS
from transcribe_audio.formatters.base import FormatterOutput
from transcribe_audio.recognizers.base import Recognizer
from transcribe_audio.recognizers.json_file import JsonFileRecognizer
from transcribe_audio.recognizers.soniox import SonioxRecognizer

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Pick a free path for one output file.

    Re-running on the same input (say with another --gap) must not clobber
    the previous export: meeting-lines.json, then meeting-lines-2.json,
    meeting-lines-3.json and so on.
    """
    first = output_dir / (stem + suffix)
    if not first.exists():
        return first

    # "-lines.json" → "-lines" + ".json"; a suffix without a dot has no extension
    label, dot, ext = suffix.rpartition(".")
    if not label:
        label, dot, ext = suffix, "", ""

    for counter in itertools.count(2):
        candidate = output_dir / "{}{}-{}{}{}".format(stem, label, counter, dot, ext)
        if not candidate.exists():
            return candidate


def save_output(
    output: FormatterOutput,
    stem: str,
    output_dir: Path,
) -> Path:
    """Write one formatter output to disk and return its path.

    Raises:
        FileWriteFailed: If the file cannot be written.
    """
    path = _resolve_output_path(stem, output.suffix, output_dir)
    try:
        path.write_text(output.content, encoding="utf-8")
    except OSError as exc:
        raise FileWriteFailed("Cannot write {}: {}".format(path, exc)) from exc
    return path


def _select_recognizer(input_path: Path) -> Optional[Recognizer]:
    """JSON results are replayed; audio goes to Soniox; anything else → None."""
    ext = input_path.suffix.lower()
    if ext == ".json":
        return JsonFileRecognizer()
    if ext in SUPPORTED_AUDIO_FORMATS:
        return SonioxRecognizer(on_status=_status)
    return None


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            _fail("Unknown format '{}'. Available formats: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


def run(args: argparse.Namespace) -> List[Path]:
    """Execute the pipeline for parsed arguments; returns saved file paths.

    RULES:
    - Validates input, output dir and formats before recognition starts
    - Timing diagnostics are logged as warnings, never fatal
    - --no-save skips file output (useful with --print / --at)
    """
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not args.no_save and not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    format_keys = _parse_formats(args.formats)
    recognizer = _select_recognizer(input_path)
    if recognizer is None:
        _fail("Unsupported input '{}'. Give a .json recognizer result or an audio file ({}).".format(
            input_path.name, ", ".join(sorted(SUPPORTED_AUDIO_FORMATS))
        ))

    _status("Recognizing with {}...".format(recognizer.name))
    tokens = asyncio.run(recognizer.recognize(input_path))
    _status("  {} words".format(len(tokens)))

    for issue in find_timing_issues(tokens):
        logger.warning("Timing issue in %s: %s", input_path.name, issue.message)

    transcript = Transcript.from_tokens(tokens, input_path.name)

    if args.print_text:
        print(synthesize(transcript.tokens, args.gap))
    if args.at is not None:
        print(highlight(transcript.tokens, args.at, args.gap))

    saved_files: List[Path] = []
    if args.no_save:
        return saved_files

    stem = input_path.stem
    for key in format_keys:
        formatter = FORMATTERS[key](gap_threshold_s=args.gap, max_chars=args.max_chars)
        _status("  Running {} formatter...".format(formatter.name))
        for output in formatter.format(transcript):
            saved_path = save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser (separate from main() so tests can inspect it)."""
    parser = argparse.ArgumentParser(
        prog="transcribe-audio",
        description="Turn word-timed speech recognition output into a punctuated "
                    "transcript and playback-ready display lines.",
    )

    parser.add_argument(
        "input_file",
        help="Recognizer result (.json) or audio file to transcribe.",
    )

    parser.add_argument(
        "--gap",
        type=float,
        default=GAP_THRESHOLD_S,
        help="Silence in seconds that ends a sentence (default: %(default)s).",
    )

    parser.add_argument(
        "--max-chars",
        type=int,
        default=MAX_CHARS_PER_LINE,
        help="Maximum characters per display line (default: %(default)s).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    parser.add_argument(
        "--print",
        dest="print_text",
        action="store_true",
        help="Print the synthesized transcript to stdout.",
    )

    parser.add_argument(
        "--at",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Print the transcript with the word playing at SECONDS marked [like this].",
    )

    parser.add_argument(
        "--no-save",
        action="store_true",
        help="Do not write output files.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m transcribe_audio`` and the console script."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except TranscribeAudioError as e:
        logger.debug("Pipeline failed", exc_info=True)
        _fail(str(e))


if __name__ == "__main__":
    main()
