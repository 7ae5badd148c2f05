# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client abstraction and factory."""

from typing import Protocol

from ..config import ProbeSettings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """Minimal protocol for issuing HTTP requests.

    Implementations report transport failures as `HttpResponse(ok=False)` rather
    than raising, so the retry loop sees every outcome the same way.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...


def create_default_http_client(settings: ProbeSettings) -> HttpClient:
    """Factory for the default httpx-backed client."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings)
