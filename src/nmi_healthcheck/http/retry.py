# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Retry policy resolution and the retry loop for HttpClient implementations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ..config import DEFAULT_RETRY_MAX, RETRY_COUNT_ENV, RETRY_MAX_ENV, RETRY_MIN_ENV, ProbeSettings
from ..durations import format_duration, parse_duration
from ..errors import ConfigurationError, TransportCategory, TransportError, categorize_exception, category_to_reason
from .client import HttpClient
from .models import HttpRequest, HttpResponse, RetryPolicy

logger = logging.getLogger(__name__)

Sleep = Callable[[float], None]


def _parse_count(name: str, raw: str) -> int:
    if not raw.isascii() or not raw.isdigit():
        raise ConfigurationError(f"environment variable '{name}' must be a non-negative integer, got {raw!r}")
    return int(raw)


def _parse_backoff(name: str, raw: str) -> float:
    try:
        return parse_duration(raw)
    except ValueError as exc:
        raise ConfigurationError(f"environment variable '{name}' is not a valid duration: {exc}") from exc


def resolve_retry_policy(settings: ProbeSettings) -> RetryPolicy:
    """
    Build a RetryPolicy from the retry settings.

    An unset maximum backoff resolves to the larger of its documented default
    (3s) and the minimum backoff, because the default minimum (10s) is larger
    than the default maximum. An explicit maximum below the minimum is rejected.
    """
    max_attempts = _parse_count(RETRY_COUNT_ENV, settings.retry_count)
    min_backoff = _parse_backoff(RETRY_MIN_ENV, settings.retry_min)
    if settings.retry_max is None:
        max_backoff = max(_parse_backoff(RETRY_MAX_ENV, DEFAULT_RETRY_MAX), min_backoff)
        logger.debug("%s not set; backoff ceiling resolved to %s", RETRY_MAX_ENV, format_duration(max_backoff))
    else:
        max_backoff = _parse_backoff(RETRY_MAX_ENV, settings.retry_max)

    policy = RetryPolicy(max_attempts=max_attempts, min_backoff=min_backoff, max_backoff=max_backoff)
    logger.debug(
        "Retry policy: %d attempts, backoff %s..%s",
        policy.max_attempts,
        format_duration(policy.min_backoff),
        format_duration(policy.max_backoff),
    )
    return policy


def send_with_retries(
    client: HttpClient,
    request: HttpRequest,
    policy: RetryPolicy,
    *,
    sleep: Sleep = time.sleep,
) -> HttpResponse:
    """
    Execute a request, retrying transport-level failures only.

    Any response carrying a status code is returned as-is on the attempt that
    produced it. When every attempt fails at the transport level, TransportError
    describes the last failure.
    """
    last_response: HttpResponse | None = None

    for attempt in range(1, policy.max_attempts + 1):
        try:
            response = client.request(request)
        except Exception as exc:  # noqa: BLE001
            response = HttpResponse(
                ok=False,
                error_message=str(exc) or type(exc).__name__,
                error_type=type(exc).__name__,
                meta={"category": categorize_exception(exc)},
            )
        # Without a status code nothing was received, whatever `ok` claims.
        if response.status_code is not None:
            response.meta["attempts"] = attempt
            return response

        last_response = response
        if attempt >= policy.max_attempts:
            break
        delay = policy.backoff(attempt)
        logger.warning(
            "%s %s failed (attempt %d/%d): %s; retrying in %s",
            request.method,
            request.url,
            attempt,
            policy.max_attempts,
            response.error_message,
            format_duration(delay),
        )
        sleep(delay)

    category = TransportCategory.UNKNOWN_ERROR
    message = "no attempt was made"
    if last_response is not None:
        category = last_response.meta.get("category", TransportCategory.UNKNOWN_ERROR)
        message = last_response.error_message or category_to_reason(category)
    raise TransportError(
        f"{request.method} {request.url} failed after {policy.max_attempts} attempt(s): {message}",
        category=category,
        attempts=policy.max_attempts,
    )


__all__ = ["resolve_retry_policy", "send_with_retries"]
