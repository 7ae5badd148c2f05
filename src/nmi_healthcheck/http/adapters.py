# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process HttpClient implementations."""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import TransportCategory
from .models import HttpRequest, HttpResponse


def transport_failure(message: str = "connection refused", category: TransportCategory = TransportCategory.CONNECTION_ERROR) -> HttpResponse:
    """Build the response an HttpClient reports for a transport-level failure."""
    return HttpResponse(ok=False, error_message=message, error_type="ConnectError", meta={"category": category})


class StubHttpClient:
    """
    Deterministic, programmable HttpClient for tests.

    Responses are served in order; the last one repeats once the sequence is
    exhausted. Every request is recorded in `requests`.
    """

    def __init__(self, responses: Iterable[HttpResponse] | None = None):
        self._responses = list(responses or [])
        self.requests: list[HttpRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def request(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        if not self._responses:
            return transport_failure("No stubbed response configured", TransportCategory.UNKNOWN_ERROR)
        return self._responses[min(self.calls - 1, len(self._responses) - 1)]
