"""Transcribe Audio: transcript synthesis for word-timed speech recognition.

WHY: Speech recognizers return bare word tokens with timing but no casing
or punctuation. Readers need sentences; a playback view needs the same
words wrapped into lines and tied back to audio time. This package turns
the token stream into both, and wraps the surrounding collaborators
(recognizer, audio player, export) behind small interfaces.

HOW: Three-stage pipeline: recognize (recognizers package), synthesize
(core package), format (pluggable formatters). The core is a set of pure
functions; the state container and playback controller sit around it.

RULES:
- All formatters consume the same Transcript IR
- The synthesizer never mutates its input and keeps no state
- Collaborator failures surface as the error kinds in errors.py
"""

__version__ = "0.1.0"
