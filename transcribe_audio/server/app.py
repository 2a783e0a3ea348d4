"""FastAPI application exposing the transcript synthesizer over HTTP.

WHY: Front ends that are not written in Python (a web player, an editor
plugin) need the same sentence inference, wrapping and highlight lookup
the CLI uses. FastAPI gives them a validated JSON API with automatic
OpenAPI documentation.

HOW: Each endpoint converts the request's token list into keyed
WordTokens with make_tokens() and calls one core function. The service
keeps no state between requests.

RULES:
- Token keys are request positions
- Invalid payloads are rejected by pydantic with 422
- Empty token lists are valid and give empty results
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from fastapi import FastAPI

from transcribe_audio import __version__
from transcribe_audio.core.ir import WordToken, make_tokens
from transcribe_audio.core.synthesizer import (
    build_display_lines,
    synthesize,
    token_active_at,
)
from transcribe_audio.formatters import FORMATTERS
from transcribe_audio.server.models import (
    ActiveTokenRequest,
    ActiveTokenResponse,
    DisplayLineOut,
    DisplayLinesRequest,
    DisplayLinesResponse,
    DisplayTokenOut,
    FormatInfo,
    HealthResponse,
    SynthesizeRequest,
    SynthesizeResponse,
    TokenIn,
    TokenOut,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Transcribe Audio API",
    description=(
        "Turns word-timed speech recognition output into a punctuated "
        "transcript, wrapped display lines, and playback highlight lookups."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


def _to_tokens(tokens: Sequence[TokenIn]) -> List[WordToken]:
    return make_tokens((t.text, t.start, t.duration) for t in tokens)


def _token_out(token: WordToken) -> TokenOut:
    return TokenOut(key=token.key, text=token.text, start=token.start, duration=token.duration)


# ---------------------------------------------------------------------------
# Endpoints: Synthesis
# ---------------------------------------------------------------------------


@app.post(
    "/synthesize",
    response_model=SynthesizeResponse,
    tags=["synthesis"],
    summary="Synthesize a punctuated transcript",
    description=(
        "Infers sentence boundaries, capitalization and terminal punctuation "
        "from the silence between words."
    ),
)
async def synthesize_transcript(request: SynthesizeRequest) -> SynthesizeResponse:
    tokens = _to_tokens(request.tokens)
    return SynthesizeResponse(
        text=synthesize(tokens, request.gap_threshold),
        token_count=len(tokens),
    )


@app.post(
    "/display-lines",
    response_model=DisplayLinesResponse,
    tags=["synthesis"],
    summary="Wrap a transcript into display lines",
    description=(
        "Greedily wraps tokens into rows of at most max_chars characters, "
        "with each token's display text and timing for click-to-seek."
    ),
)
async def display_lines(request: DisplayLinesRequest) -> DisplayLinesResponse:
    tokens = _to_tokens(request.tokens)
    lines = build_display_lines(tokens, request.max_chars, request.gap_threshold)
    return DisplayLinesResponse(lines=[
        DisplayLineOut(
            index=i,
            start=line.start,
            text=line.text,
            tokens=[
                DisplayTokenOut(
                    key=d.token.key,
                    text=d.token.text,
                    start=d.token.start,
                    duration=d.token.duration,
                    display=d.text,
                )
                for d in line.tokens
            ],
        )
        for i, line in enumerate(lines)
    ])


@app.post(
    "/active-token",
    response_model=ActiveTokenResponse,
    tags=["playback"],
    summary="Find the token playing at a time",
    description="Returns the first token with start <= time < start + duration, or null.",
)
async def active_token(request: ActiveTokenRequest) -> ActiveTokenResponse:
    token = token_active_at(_to_tokens(request.tokens), request.time)
    return ActiveTokenResponse(token=_token_out(token) if token is not None else None)


# ---------------------------------------------------------------------------
# Endpoints: Formats / Health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available output formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(key=key, name=formatter.name, suffix=formatter.suffix))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the transcribe-audio-api console script."""
    import uvicorn
    logger.info("Starting Transcribe Audio API on port 8000")
    uvicorn.run(app, host="0.0.0.0", port=8000)
