"""Recognizer backed by a saved recognizer result (JSON file).

WHY: Recognition is slow and sometimes happens elsewhere: a Vosk script,
a Whisper run, a Soniox job fetched earlier. Re-synthesizing, exporting
or re-wrapping a transcript should not need the audio again, only the
word timings that were already produced.

HOW: load_token_file() reads the JSON and parse_token_document() detects
its shape, converting every supported layout into keyed WordTokens. The
native layout is validated with jsonschema before use.
JsonFileRecognizer wraps the loader behind the Recognizer interface.

RULES:
- Native: [{"text", "start", "duration"}] or {"words": [...]}
- Vosk: {"result": [{"word", "start", "end"}]} or a list of such results;
  silent chunks ({"text": ""}) contribute no words
- Whisper: {"segments": [{"words": [{"word", "start", "end"}]}]}
- Soniox: {"tokens": [{"text", "start_ms", "end_ms"}]} (sub-words assembled)
- Anything else raises TokenFileError
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

import jsonschema

from transcribe_audio.core.ir import WordToken, make_tokens
from transcribe_audio.errors import TokenFileError
from transcribe_audio.recognizers.assembler import assemble_soniox_tokens
from transcribe_audio.recognizers.base import Recognizer

logger = logging.getLogger(__name__)

NATIVE_TOKENS_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["text", "start", "duration"],
        "properties": {
            "text": {"type": "string"},
            "start": {"type": "number"},
            "duration": {"type": "number"},
        },
    },
}


def _native_tokens(items: List[Dict[str, Any]]) -> List[WordToken]:
    try:
        jsonschema.validate(items, NATIVE_TOKENS_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise TokenFileError("Invalid word token list: {}".format(exc.message)) from exc
    return make_tokens((item["text"], item["start"], item["duration"]) for item in items)


def _start_end_tokens(items: List[Dict[str, Any]]) -> List[WordToken]:
    """Tokens from Vosk/Whisper style {"word", "start", "end"} dicts."""
    try:
        return make_tokens(
            (item["word"].strip(), item["start"], item["end"] - item["start"])
            for item in items
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise TokenFileError("Invalid word entry: missing or bad {}".format(exc)) from exc


def _is_vosk_chunk(item: Any) -> bool:
    # Silent chunks carry only {"text": ""}; native tokens always have "start"
    return isinstance(item, dict) and ("result" in item or ("text" in item and "start" not in item))


def _is_word_list(items: List[Any]) -> bool:
    return bool(items) and all(isinstance(i, dict) and "word" in i for i in items)


def parse_token_document(data: Any) -> List[WordToken]:
    """Convert a decoded recognizer JSON document into word tokens.

    Raises:
        TokenFileError: If the document matches no supported layout.
    """
    if isinstance(data, list):
        if not data:
            return []
        if all(_is_vosk_chunk(i) for i in data):
            # Vosk emits one result object per recognized chunk
            words: List[Dict[str, Any]] = []
            for chunk in data:
                words.extend(chunk.get("result") or [])
            return _start_end_tokens(words)
        if _is_word_list(data):
            return _start_end_tokens(data)
        return _native_tokens(data)

    if isinstance(data, dict):
        if "words" in data:
            if _is_word_list(data["words"]):
                return _start_end_tokens(data["words"])
            return _native_tokens(data["words"])
        if "result" in data:
            return _start_end_tokens(data["result"])
        if "segments" in data:
            words = []
            for segment in data["segments"]:
                words.extend(segment.get("words", []))
            return _start_end_tokens(words)
        if "tokens" in data:
            try:
                return assemble_soniox_tokens(data["tokens"])
            except (KeyError, TypeError) as exc:
                raise TokenFileError("Invalid Soniox token: missing {}".format(exc)) from exc

    raise TokenFileError(
        "Unrecognized recognizer output. Expected a word list, or an object "
        "with 'words', 'result', 'segments' or 'tokens'."
    )


def load_token_file(path: Path) -> List[WordToken]:
    """Read a saved recognizer result and return its word tokens."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise TokenFileError("Cannot read {}: {}".format(path, exc)) from exc
    except json.JSONDecodeError as exc:
        raise TokenFileError("{} is not valid JSON: {}".format(path.name, exc)) from exc

    tokens = parse_token_document(data)
    logger.info("Loaded %d tokens from %s", len(tokens), path.name)
    return tokens


class JsonFileRecognizer(Recognizer):
    """Recognizer that replays a saved result as a single final batch."""

    @property
    def name(self) -> str:
        return "JSON file"

    async def batches(self, path: Path) -> AsyncIterator[List[WordToken]]:
        yield load_token_file(path)
