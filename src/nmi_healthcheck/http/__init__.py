# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP client exports."""

from .adapters import StubHttpClient, transport_failure
from .client import HttpClient, create_default_http_client
from .httpx_client import HttpxClient
from .models import Headers, HttpRequest, HttpResponse, RetryPolicy
from .retry import resolve_retry_policy, send_with_retries

__all__ = [
    "Headers",
    "HttpClient",
    "HttpxClient",
    "HttpRequest",
    "HttpResponse",
    "RetryPolicy",
    "StubHttpClient",
    "create_default_http_client",
    "resolve_retry_policy",
    "send_with_retries",
    "transport_failure",
]
