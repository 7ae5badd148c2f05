# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Single logical probe request with transport retries."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .http.client import HttpClient
from .http.models import HttpRequest, RetryPolicy
from .http.retry import Sleep, send_with_retries
from .targets import ProbeTarget, validate_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeOutcome:
    """A completed HTTP exchange: status code, raw body and how many attempts it took."""

    status_code: int
    body: bytes = b""
    attempts: int = 1


class ProbeClient:
    """Issue one GET against a ProbeTarget, retrying transport failures per the RetryPolicy."""

    def __init__(self, http_client: HttpClient, policy: RetryPolicy, *, sleep: Sleep = time.sleep):
        self.http_client = http_client
        self.policy = policy
        self._sleep = sleep

    def fetch(self, target: ProbeTarget) -> ProbeOutcome:
        """Return the ProbeOutcome, or raise ConfigurationError (bad URL) / TransportError (retries exhausted)."""
        validate_url(target.url)
        request = HttpRequest(url=target.url, method="GET", headers=dict(target.headers))
        logger.debug("Probing %s at %s", target.name, target.url)

        response = send_with_retries(self.http_client, request, self.policy, sleep=self._sleep)
        return ProbeOutcome(
            status_code=response.status_code,
            body=response.content,
            attempts=int(response.meta.get("attempts", 1)),
        )


__all__ = ["ProbeClient", "ProbeOutcome"]
