# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe target construction for the NMI liveness and identity-token checks."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from .config import ProbeSettings
from .errors import ConfigurationError

NMI_LIVENESS_PORT = 8085
NMI_LIVENESS_PATH = "/healthz"
NMI_ACTIVE_BODY = b"Active"


@dataclass(frozen=True)
class ProbeTarget:
    """Where to send the probe and what a healthy answer looks like.

    `expected_body` of None means any 200 response is healthy.
    """

    name: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    expected_body: bytes | None = None


def validate_url(url: str) -> httpx.URL:
    """Parse an absolute http(s) URL, raising ConfigurationError when it cannot be requested."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigurationError(f"error creating URL {url!r}: {exc}") from exc
    if parsed.scheme not in {"http", "https"}:
        raise ConfigurationError(f"error creating URL {url!r}: unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise ConfigurationError(f"error creating URL {url!r}: missing host")
    return parsed


def build_liveness_target(host_ip: str) -> ProbeTarget:
    host = host_ip.strip()
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    url = f"http://{host}:{NMI_LIVENESS_PORT}{NMI_LIVENESS_PATH}"
    validate_url(url)
    return ProbeTarget(name="NMI liveness probe", url=url, expected_body=NMI_ACTIVE_BODY)


def build_identity_target(settings: ProbeSettings) -> ProbeTarget:
    endpoint = validate_url(settings.identity_endpoint)
    url = endpoint.copy_merge_params(
        {
            "api-version": settings.identity_api_version,
            "resource": settings.identity_resource,
        }
    )
    return ProbeTarget(
        name="identity token endpoint",
        url=str(url),
        headers={"Metadata": "true"},
    )


__all__ = [
    "NMI_ACTIVE_BODY",
    "NMI_LIVENESS_PATH",
    "NMI_LIVENESS_PORT",
    "ProbeTarget",
    "build_identity_target",
    "build_liveness_target",
    "validate_url",
]
