"""Error kinds raised by the collaborators around the synthesizer.

WHY: The synthesizer itself has no failure modes: empty or jittery input
yields a defined result. Everything that can genuinely fail lives in the
collaborators (recognizer, audio player, file export), and callers need
to tell those failures apart to show the right message.

HOW: One base class, TranscribeAudioError, with a subclass per failure
kind. Network and OS exceptions are wrapped at the collaborator boundary
with ``raise ... from exc`` so the original cause is kept.

RULES:
- Never raised by transcribe_audio.core
- TokenFileError is also a ValueError (bad input data, not an IO failure)
"""

from __future__ import annotations


class TranscribeAudioError(Exception):
    """Base class for all collaborator failures."""


class AuthorizationDenied(TranscribeAudioError):
    """The recognizer refused access (missing or rejected credentials)."""


class RecognitionFailed(TranscribeAudioError):
    """The recognizer could not produce a transcript.

    Carries the HTTP status code when the failure came from the API.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class RecognitionTimeout(RecognitionFailed):
    """Recognition did not finish within the polling deadline."""


class AudioDecodeFailed(TranscribeAudioError):
    """The audio file could not be opened, decoded, or is not a supported type."""


class FileWriteFailed(TranscribeAudioError):
    """An export target could not be written."""


class TokenFileError(TranscribeAudioError, ValueError):
    """A saved recognizer result could not be parsed into word tokens."""
