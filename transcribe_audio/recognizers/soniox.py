"""Recognizer backed by the Soniox non-realtime speech-to-text API.

WHY: Turning audio into word timings is the recognizer's job. Soniox's
async API does it remotely: upload the file, create a transcription, poll
until it completes, fetch the token array, and clean up. This module
hides that workflow behind the Recognizer interface.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. ``batches()`` runs the
whole workflow inside one client session and yields a single final batch
of assembled word tokens. Cleanup runs in a finally block, so it also
happens when the caller stops iterating early.

RULES:
- Polling uses exponential backoff: 2s initial, 1.5x factor, 15s max, 60min timeout
- HTTP 401/403 → AuthorizationDenied; other non-2xx → RecognitionFailed
- Job status "error" → RecognitionFailed; deadline → RecognitionTimeout
- Unsupported or unreadable audio → AudioDecodeFailed (no request is sent)
- Cleanup is best-effort: failures are logged, never raised
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List

import httpx

from transcribe_audio.config import (
    DEFAULT_LANGUAGE,
    SONIOX_BASE_URL,
    SONIOX_MODEL,
    SUPPORTED_AUDIO_FORMATS,
    load_api_key,
)
from transcribe_audio.core.ir import WordToken
from transcribe_audio.errors import (
    AudioDecodeFailed,
    AuthorizationDenied,
    RecognitionFailed,
    RecognitionTimeout,
)
from transcribe_audio.recognizers.assembler import assemble_soniox_tokens
from transcribe_audio.recognizers.base import Recognizer

logger = logging.getLogger(__name__)

_POLL_INITIAL_INTERVAL_S = 2.0
_POLL_BACKOFF_FACTOR = 1.5
_POLL_MAX_INTERVAL_S = 15.0
_POLL_TIMEOUT_S = 60 * 60  # 60 minutes


def _check_response(resp: httpx.Response, expected: tuple = (200,)) -> Dict[str, Any]:
    """Return the JSON body, or raise the error kind matching the status code."""
    if resp.status_code in (401, 403):
        raise AuthorizationDenied(
            "Soniox rejected the API key ({}): {}".format(resp.status_code, resp.text)
        )
    if resp.status_code not in expected:
        raise RecognitionFailed(
            "Soniox API error {}: {}".format(resp.status_code, resp.text),
            status_code=resp.status_code,
        )
    return resp.json()


class SonioxRecognizer(Recognizer):
    """Async recognizer for the Soniox transcription API.

    RULES:
    - api_key defaults to load_api_key() from .env (resolved on first use)
    - base_url / model default to the values in config
    - transport is passed to httpx (tests use httpx.MockTransport)
    - on_status, when given, receives human-readable progress strings
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        language_hints: List[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        on_status: Callable[[str], None] | None = None,
        poll_timeout_s: float = _POLL_TIMEOUT_S,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or SONIOX_BASE_URL).rstrip("/")
        self._model = model or SONIOX_MODEL
        self._language_hints = language_hints or [DEFAULT_LANGUAGE]
        self._transport = transport
        self._on_status = on_status
        self._poll_timeout_s = poll_timeout_s

    @property
    def name(self) -> str:
        return "Soniox"

    def _status(self, msg: str) -> None:
        logger.info(msg)
        if self._on_status:
            self._on_status(msg)

    async def batches(self, path: Path) -> AsyncIterator[List[WordToken]]:
        path = Path(path)
        ext = path.suffix.lower()
        if ext not in SUPPORTED_AUDIO_FORMATS:
            raise AudioDecodeFailed(
                "Unsupported audio type '{}'. Supported formats: {}".format(
                    ext, ", ".join(sorted(SUPPORTED_AUDIO_FORMATS))
                )
            )
        if not path.is_file():
            raise AudioDecodeFailed("Audio file not found: {}".format(path))

        api_key = self._api_key or load_api_key()
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers={"Authorization": "Bearer {}".format(api_key)},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        ) as client:
            file_id: str | None = None
            transcription_id: str | None = None
            try:
                file_id = await self._upload(client, path)
                transcription_id = await self._create(client, file_id)
                await self._poll(client, transcription_id)
                tokens = await self._fetch(client, transcription_id)
            except httpx.HTTPError as exc:
                raise RecognitionFailed("Soniox request failed: {}".format(exc)) from exc
            finally:
                await self._cleanup(client, transcription_id, file_id)

            words = assemble_soniox_tokens(tokens)
            self._status("Assembled {} words".format(len(words)))
            yield words

    # ------------------------------------------------------------------
    # Workflow steps
    # ------------------------------------------------------------------

    async def _upload(self, client: httpx.AsyncClient, path: Path) -> str:
        self._status("Uploading file...")
        try:
            with open(path, "rb") as f:
                resp = await client.post("/files", files={"file": (path.name, f)})
        except OSError as exc:
            raise AudioDecodeFailed("Cannot read {}: {}".format(path, exc)) from exc
        return _check_response(resp, (200, 201))["id"]

    async def _create(self, client: httpx.AsyncClient, file_id: str) -> str:
        self._status("Creating transcription...")
        body = {
            "model": self._model,
            "file_id": file_id,
            "language_hints": self._language_hints,
        }
        resp = await client.post("/transcriptions", json=body)
        return _check_response(resp, (200, 201))["id"]

    async def _poll(self, client: httpx.AsyncClient, transcription_id: str) -> None:
        interval = _POLL_INITIAL_INTERVAL_S
        start_time = time.monotonic()

        while True:
            elapsed = time.monotonic() - start_time
            if elapsed > self._poll_timeout_s:
                raise RecognitionTimeout(
                    "Transcription {} timed out after {:.0f}s".format(transcription_id, elapsed)
                )

            resp = await client.get("/transcriptions/{}".format(transcription_id))
            data = _check_response(resp)
            status = data.get("status")

            if status == "completed":
                self._status("Transcription complete.")
                return
            if status == "error":
                raise RecognitionFailed(
                    "Transcription failed: {}".format(data.get("error_message"))
                )

            self._status("Transcribing... ({}, elapsed: {:.0f}s)".format(status, elapsed))
            await asyncio.sleep(interval)
            interval = min(interval * _POLL_BACKOFF_FACTOR, _POLL_MAX_INTERVAL_S)

    async def _fetch(self, client: httpx.AsyncClient, transcription_id: str) -> List[Dict[str, Any]]:
        self._status("Fetching transcript...")
        resp = await client.get("/transcriptions/{}/transcript".format(transcription_id))
        return _check_response(resp)["tokens"]

    async def _cleanup(
        self,
        client: httpx.AsyncClient,
        transcription_id: str | None,
        file_id: str | None,
    ) -> None:
        if transcription_id:
            try:
                await client.delete("/transcriptions/{}".format(transcription_id))
            except httpx.HTTPError:
                logger.warning("Failed to delete transcription %s", transcription_id)
        if file_id:
            try:
                await client.delete("/files/{}".format(file_id))
            except httpx.HTTPError:
                logger.warning("Failed to delete file %s", file_id)
