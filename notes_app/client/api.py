"""
Notes Client — HTTP API Client
================================

What:  Thin async wrapper around the Notes API.
How:   One shared httpx.AsyncClient with a base URL and a bounded timeout.
       httpx event hooks log every request and response; transport and
       server failures are normalized into two distinct exception types.
Who:   Used by NotesStore; nothing else talks HTTP.

Error normalization:
    ┌──────────────────────────────┬──────────────────────────────────────┐
    │ What happened                │ Raised                               │
    ├──────────────────────────────┼──────────────────────────────────────┤
    │ No response (DNS, refused,   │ ApiConnectionError                   │
    │ reset, timeout)              │ "Unable to connect to server. ..."   │
    │ Response with 4xx/5xx status │ ApiServerError(message, status_code) │
    │                              │ message = server's `message` field   │
    └──────────────────────────────┴──────────────────────────────────────┘

Retry policy:
    GET requests that fail with ApiConnectionError are retried with
    exponential backoff (tenacity). Writes are sent once: a timed-out POST
    may still have been applied by the server.
"""

import logging
from typing import Any, List, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from notes_app.client.models import Note
from notes_app.config import ClientSettings

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Unable to connect to server. Please check your connection."


# ══════════════════════════════════════════════════════════════════════════
# Errors
# ══════════════════════════════════════════════════════════════════════════


class ApiError(Exception):
    """Base class for every failure surfaced by NotesApiClient."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ApiConnectionError(ApiError):
    """The request never produced a response (network down, timeout, refused)."""

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE):
        super().__init__(message)


class ApiServerError(ApiError):
    """The server answered with an error status; `message` is the server's text."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def server_error_message(response: httpx.Response) -> str:
    """Pick the human-readable message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return f"Server error: {response.status_code}"


# ══════════════════════════════════════════════════════════════════════════
# Logging hooks
# ══════════════════════════════════════════════════════════════════════════


async def _log_request(request: httpx.Request) -> None:
    logger.info("Making %s request to %s", request.method, request.url.path)


async def _log_response(response: httpx.Response) -> None:
    request = response.request
    level = logging.WARNING if response.is_error else logging.INFO
    logger.log(
        level,
        "Response received from %s %s: %d",
        request.method,
        request.url.path,
        response.status_code,
    )


# ══════════════════════════════════════════════════════════════════════════
# Client
# ══════════════════════════════════════════════════════════════════════════


class NotesApiClient:
    """
    Remote calls for the five note/tag operations plus the liveness probe.

    Usage:
        async with NotesApiClient("http://localhost:3000") as api:
            notes = await api.get_all_notes()

    Args:
        base_url:        API root, e.g. http://localhost:3000
        timeout:         Seconds allowed per request
        retry_attempts:  Total tries for idempotent GETs (1 disables retries)
        retry_min_wait:  First backoff delay in seconds
        retry_max_wait:  Backoff ceiling in seconds
        transport:       Optional httpx transport (tests pass MockTransport)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_min_wait: float = 0.5,
        retry_max_wait: float = 4.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.retry_attempts = retry_attempts
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, client_settings: ClientSettings, **kwargs) -> "NotesApiClient":
        return cls(
            base_url=client_settings.api_base_url,
            timeout=client_settings.request_timeout,
            retry_attempts=client_settings.retry_attempts,
            retry_min_wait=client_settings.retry_min_wait,
            retry_max_wait=client_settings.retry_max_wait,
            **kwargs,
        )

    async def __aenter__(self) -> "NotesApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Operations ────────────────────────────────────────────────────────

    async def get_all_notes(self) -> List[Note]:
        response = await self._get("/notes")
        return [Note.model_validate(item) for item in response.json()]

    async def create_note(self, title: str, content: str, tags: Optional[List[str]] = None) -> Note:
        payload = {"title": title, "content": content, "tags": list(tags or [])}
        response = await self._send("POST", "/notes", json=payload)
        return Note.model_validate(response.json())

    async def update_note(
        self,
        note_id: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Note:
        """Send only the fields that are not None."""
        payload = {
            key: value
            for key, value in (("title", title), ("content", content), ("tags", tags))
            if value is not None
        }
        response = await self._send("PUT", f"/notes/{note_id}", json=payload)
        return Note.model_validate(response.json())

    async def delete_note(self, note_id: str) -> None:
        await self._send("DELETE", f"/notes/{note_id}")

    async def get_all_tags(self) -> List[str]:
        response = await self._get("/tags")
        return list(response.json())

    async def health_check(self) -> dict:
        response = await self._get("/")
        return response.json()

    # ── Transport ─────────────────────────────────────────────────────────

    async def _get(self, path: str) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ApiConnectionError),
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry_min_wait,
                max=self.retry_max_wait,
                jitter=self.retry_min_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send("GET", path)

    async def _send(self, method: str, path: str, json: Any = None) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            # Covers connect/read/write failures and every timeout flavour
            logger.error("No response for %s %s: %s", method, path, type(e).__name__)
            raise ApiConnectionError() from e

        if response.is_error:
            message = server_error_message(response)
            logger.error("%s %s failed with %d: %s", method, path, response.status_code, message)
            raise ApiServerError(message, response.status_code)

        return response
