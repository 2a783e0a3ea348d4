"""Recognizer backends: audio (or a saved result) in, word tokens out.

WHY: Speech recognition is an external capability. The rest of the
project only needs ordered word tokens; how they were produced is a
backend detail.

HOW: base.py defines the Recognizer interface and the batch helpers,
json_file.py replays saved recognizer output, soniox.py calls the Soniox
API, assembler.py turns Soniox sub-words into words.
"""

from transcribe_audio.recognizers.base import Recognizer, last_batch, recognition_progress
from transcribe_audio.recognizers.json_file import JsonFileRecognizer, load_token_file
from transcribe_audio.recognizers.soniox import SonioxRecognizer

__all__ = [
    "JsonFileRecognizer",
    "Recognizer",
    "SonioxRecognizer",
    "last_batch",
    "load_token_file",
    "recognition_progress",
]
