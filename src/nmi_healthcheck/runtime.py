# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level facade that wires settings, retry policy, transport and validation for one probe run."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass

from .config import HOST_IP_ENV, ProbeSettings
from .errors import ConfigurationError, ProbeError
from .http.client import HttpClient, create_default_http_client
from .http.retry import Sleep, resolve_retry_policy
from .probe import ProbeClient
from .targets import ProbeTarget, build_identity_target, build_liveness_target
from .validation import validate_outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    healthy: bool
    message: str
    error: ProbeError | None = None

    @property
    def exit_code(self) -> int:
        return 0 if self.healthy else 1


class ProbeRunner:
    """
    Runs exactly one logical probe per call.

    Errors are checked in a fixed order: target configuration (the mandatory
    host for the liveness probe), then the retry policy, then the transport.
    No HttpClient is created, and no request is made, until both of the first
    two have resolved.
    """

    def __init__(
        self,
        settings: ProbeSettings,
        http_client: HttpClient | None = None,
        *,
        sleep: Sleep = time.sleep,
    ):
        self.settings = settings
        self.http_client = http_client
        self._sleep = sleep

    def check_liveness(self) -> ProbeResult:
        """Ask the NMI on this node whether it is alive."""

        def target() -> ProbeTarget:
            if self.settings.host_ip is None:
                raise ConfigurationError(f"Environment variable '{HOST_IP_ENV}' should be set")
            return build_liveness_target(self.settings.host_ip)

        return self._run(target, "request to the NMI was successful")

    def check_identity(self) -> ProbeResult:
        """Ask the metadata endpoint (through the NMI) for an identity token."""
        return self._run(lambda: build_identity_target(self.settings), "identity token endpoint returned a token response")

    def _run(self, build_target: Callable[[], ProbeTarget], success_message: str) -> ProbeResult:
        try:
            target = build_target()
            policy = resolve_retry_policy(self.settings)
            owns_client = self.http_client is None
            client = self.http_client or create_default_http_client(self.settings)
            try:
                outcome = ProbeClient(client, policy, sleep=self._sleep).fetch(target)
            finally:
                if owns_client:
                    self._close(client)
            validate_outcome(outcome, target)
        except ProbeError as exc:
            logger.debug("Probe failed with %s", exc.kind.value)
            return ProbeResult(healthy=False, message=exc.describe(), error=exc)

        logger.debug("%s healthy after %d attempt(s)", target.name, outcome.attempts)
        return ProbeResult(healthy=True, message=success_message)

    @staticmethod
    def _close(client: HttpClient) -> None:
        with suppress(Exception):
            close = getattr(client, "close", None)
            if close is not None:
                close()


def run_liveness_probe(settings: ProbeSettings, http_client: HttpClient | None = None, *, sleep: Sleep = time.sleep) -> ProbeResult:
    return ProbeRunner(settings, http_client, sleep=sleep).check_liveness()


def run_identity_probe(settings: ProbeSettings, http_client: HttpClient | None = None, *, sleep: Sleep = time.sleep) -> ProbeResult:
    return ProbeRunner(settings, http_client, sleep=sleep).check_identity()


__all__ = ["ProbeResult", "ProbeRunner", "run_identity_probe", "run_liveness_probe"]
