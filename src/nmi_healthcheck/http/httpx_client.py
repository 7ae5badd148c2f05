# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx-backed HttpClient implementation."""

from __future__ import annotations

import logging

import httpx

from ..config import HTTP_TIMEOUT_ENV, USER_AGENT_ENV, ProbeSettings
from ..durations import parse_duration
from ..errors import ConfigurationError, categorize_exception
from .models import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

# Health and token responses are tiny; anything past this is not read.
MAX_BODY_BYTES = 64 * 1024


def _parse_timeout(raw: str) -> float:
    try:
        timeout = parse_duration(raw)
    except ValueError as exc:
        raise ConfigurationError(f"environment variable '{HTTP_TIMEOUT_ENV}' is not a valid duration: {exc}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"environment variable '{HTTP_TIMEOUT_ENV}' must be a positive duration, got {raw!r}")
    return timeout


class HttpxClient:
    """Synchronous httpx client wrapper."""

    def __init__(self, settings: ProbeSettings, client: httpx.Client | None = None):
        if not settings.user_agent.isascii():
            raise ConfigurationError(f"environment variable '{USER_AGENT_ENV}' must contain only ASCII characters, got {settings.user_agent!r}")
        self.settings = settings
        self.timeout = _parse_timeout(self.settings.http_timeout)
        self._client = client or httpx.Client(follow_redirects=True, timeout=self.timeout)

    def request(self, request: HttpRequest) -> HttpResponse:
        headers = dict(request.headers or {})
        headers.setdefault("User-Agent", self.settings.user_agent)
        try:
            with self._client.stream(request.method, request.url, headers=headers) as resp:
                content = bytearray()
                truncated = False
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    remaining = MAX_BODY_BYTES - len(content)
                    if len(chunk) > remaining:
                        content.extend(chunk[:remaining])
                        truncated = True
                        break
                    content.extend(chunk)

            return HttpResponse(
                ok=True,
                status_code=resp.status_code,
                headers=dict(resp.headers),
                content=bytes(content),
                url=str(resp.url),
                meta={"body_truncated": truncated},
            )
        except httpx.HTTPError as exc:
            category = categorize_exception(exc)
            logger.debug("Transport failure for %s: %s (%s)", request.url, exc, category.value)
            return HttpResponse(
                ok=False,
                url=request.url,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                meta={"category": category},
            )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxClient:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()
