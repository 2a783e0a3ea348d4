"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
rejects malformed token lists before they reach the synthesizer.

HOW: Request models carry the token list plus synthesis settings;
response models mirror the core outputs (text, display lines, active
token). All fields have descriptions for the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Token keys are assigned by the server (position), never by the client
- Timing values are not range-checked (recognizer jitter is expected)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from transcribe_audio.config import GAP_THRESHOLD_S, MAX_CHARS_PER_LINE


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TokenIn(BaseModel):
    """One recognized word as sent by a client."""

    text: str = Field(description="Raw word text as recognized.")
    start: float = Field(description="Start time in seconds from the beginning of the audio.")
    duration: float = Field(description="Duration of the word in seconds.")


class SynthesizeRequest(BaseModel):
    """Token sequence plus the silence threshold."""

    tokens: List[TokenIn] = Field(description="Ordered word tokens.")
    gap_threshold: float = Field(
        default=GAP_THRESHOLD_S,
        gt=0,
        description="Silence in seconds that ends a sentence.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "tokens": [
                    {"text": "how", "start": 0.0, "duration": 0.3},
                    {"text": "are", "start": 1.0, "duration": 0.3},
                ],
                "gap_threshold": 0.6,
            }
        ]
    }}


class DisplayLinesRequest(SynthesizeRequest):
    """Synthesis request with a line width for wrapping."""

    max_chars: int = Field(
        default=MAX_CHARS_PER_LINE,
        ge=1,
        description="Maximum characters per display line.",
    )


class ActiveTokenRequest(BaseModel):
    """Token sequence plus a playback time."""

    tokens: List[TokenIn] = Field(description="Ordered word tokens.")
    time: float = Field(description="Playback position in seconds.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenOut(BaseModel):
    key: int = Field(description="Stable token key (position in the request).")
    text: str = Field(description="Raw word text.")
    start: float = Field(description="Start time in seconds.")
    duration: float = Field(description="Duration in seconds.")


class SynthesizeResponse(BaseModel):
    text: str = Field(description="Punctuated, capitalized transcript.")
    token_count: int = Field(description="Number of tokens synthesized.")


class DisplayTokenOut(TokenOut):
    display: str = Field(description="Token text as rendered in the transcript.")


class DisplayLineOut(BaseModel):
    index: int = Field(description="Row number, starting at 0.")
    start: float = Field(description="Start time of the first token on the row.")
    text: str = Field(description="Rendered row text.")
    tokens: List[DisplayTokenOut] = Field(description="Tokens on the row, in order.")


class DisplayLinesResponse(BaseModel):
    lines: List[DisplayLineOut] = Field(description="Wrapped display rows.")


class ActiveTokenResponse(BaseModel):
    token: Optional[TokenOut] = Field(
        default=None,
        description="Token playing at the requested time, or null.",
    )


class FormatInfo(BaseModel):
    key: str = Field(description="Format identifier used by the CLI.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-transcript.txt').")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
