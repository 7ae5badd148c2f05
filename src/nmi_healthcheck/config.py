# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for the probe commands."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"nmi-healthcheck/{__version__}"

HOST_IP_ENV = "HOST_IP"
RETRY_COUNT_ENV = "HTTP_RETRY_COUNT"
RETRY_MIN_ENV = "HTTP_RETRY_MIN_SECONDS"
RETRY_MAX_ENV = "HTTP_RETRY_MAX_SECONDS"
HTTP_TIMEOUT_ENV = "HTTP_TIMEOUT"
IDENTITY_ENDPOINT_ENV = "IDENTITY_ENDPOINT"
IDENTITY_RESOURCE_ENV = "IDENTITY_RESOURCE"
IDENTITY_API_VERSION_ENV = "IDENTITY_API_VERSION"
USER_AGENT_ENV = "NMI_HEALTHCHECK_USER_AGENT"

DEFAULT_RETRY_COUNT = "5"
DEFAULT_RETRY_MIN = "10s"
# Smaller than DEFAULT_RETRY_MIN; see resolve_retry_policy() for how an unset ceiling is resolved.
DEFAULT_RETRY_MAX = "3s"
DEFAULT_HTTP_TIMEOUT = "5s"
DEFAULT_IDENTITY_ENDPOINT = "http://169.254.169.254/metadata/identity/oauth2/token"
DEFAULT_IDENTITY_RESOURCE = "https://management.azure.com/"
DEFAULT_IDENTITY_API_VERSION = "2018-02-01"


@dataclass(frozen=True)
class ProbeSettings:
    """
    Raw probe configuration, captured once at process start.

    Values are kept as the strings found in the environment. Parsing happens in
    the component that owns each value so that failures are reported in a fixed
    order (host first, then retry policy) and name the offending variable.
    """

    host_ip: str | None = None
    retry_count: str = DEFAULT_RETRY_COUNT
    retry_min: str = DEFAULT_RETRY_MIN
    retry_max: str | None = None
    http_timeout: str = DEFAULT_HTTP_TIMEOUT
    identity_endpoint: str = DEFAULT_IDENTITY_ENDPOINT
    identity_resource: str = DEFAULT_IDENTITY_RESOURCE
    identity_api_version: str = DEFAULT_IDENTITY_API_VERSION
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProbeSettings:
        """Create settings from an environment mapping (defaults to os.environ, read at call time)."""
        env = os.environ if environ is None else environ
        return cls(
            host_ip=env.get(HOST_IP_ENV),
            retry_count=env.get(RETRY_COUNT_ENV, cls.retry_count),
            retry_min=env.get(RETRY_MIN_ENV, cls.retry_min),
            retry_max=env.get(RETRY_MAX_ENV),
            http_timeout=env.get(HTTP_TIMEOUT_ENV, cls.http_timeout),
            identity_endpoint=env.get(IDENTITY_ENDPOINT_ENV, cls.identity_endpoint),
            identity_resource=env.get(IDENTITY_RESOURCE_ENV, cls.identity_resource),
            identity_api_version=env.get(IDENTITY_API_VERSION_ENV, cls.identity_api_version),
            user_agent=env.get(USER_AGENT_ENV, cls.user_agent),
        )


def load_probe_settings(environ: Mapping[str, str] | None = None) -> ProbeSettings:
    """Load probe settings from the environment with documented defaults."""
    return ProbeSettings.from_env(environ)


__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_IDENTITY_API_VERSION",
    "DEFAULT_IDENTITY_ENDPOINT",
    "DEFAULT_IDENTITY_RESOURCE",
    "DEFAULT_RETRY_COUNT",
    "DEFAULT_RETRY_MAX",
    "DEFAULT_RETRY_MIN",
    "DEFAULT_USER_AGENT",
    "HOST_IP_ENV",
    "HTTP_TIMEOUT_ENV",
    "RETRY_COUNT_ENV",
    "RETRY_MAX_ENV",
    "RETRY_MIN_ENV",
    "ProbeSettings",
    "load_probe_settings",
]
