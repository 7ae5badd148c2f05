# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response data models and the retry policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..durations import format_duration
from ..errors import ConfigurationError

Headers = dict[str, str]


@dataclass
class HttpRequest:
    """Normalized request representation consumed by HttpClient implementations."""

    url: str
    method: str = "GET"
    headers: Headers | None = None


@dataclass
class HttpResponse:
    """
    Normalized HTTP response.

    `ok` is False only for transport-level failures, in which case `status_code`
    is None and `error_message`/`error_type` describe the failure. Any response
    that carries a status code, 5xx included, is `ok`; the retry loop treats a
    missing status code as a transport failure regardless of `ok`.
    """

    ok: bool
    status_code: int | None = None
    headers: Headers = field(default_factory=dict)
    content: bytes = b""
    url: str | None = None
    error_message: str | None = None
    error_type: str | None = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded exponential backoff for transport failures. Durations are in seconds."""

    max_attempts: int = 5
    min_backoff: float = 10.0
    max_backoff: float = 10.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ConfigurationError(f"retry attempt count must be at least 1, got {self.max_attempts}")
        if self.min_backoff < 0 or self.max_backoff < 0:
            raise ConfigurationError("retry backoff durations must not be negative")
        if self.min_backoff > self.max_backoff:
            raise ConfigurationError(
                f"minimum retry backoff ({format_duration(self.min_backoff)}) "
                f"exceeds maximum retry backoff ({format_duration(self.max_backoff)})"
            )

    def backoff(self, retry_number: int) -> float:
        """Delay before the given retry (1-based): min_backoff doubled per retry, capped at max_backoff."""
        if retry_number < 1:
            return 0.0
        exponent = min(retry_number - 1, 64)
        return min(self.min_backoff * (2**exponent), self.max_backoff)
