# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
nmi-healthcheck package entrypoint.

Probe commands a pod runs to confirm that the node's NMI (the metadata-identity
proxy) is alive and forwarding identity-token requests. HTTP behavior is
abstracted behind an injectable client interface, and configuration is captured
once into a settings object that is passed to every component.
"""

from .config import ProbeSettings, load_probe_settings
from .errors import (
    ConfigurationError,
    ErrorKind,
    ProbeError,
    ProtocolError,
    SemanticError,
    TransportError,
)
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    RetryPolicy,
    StubHttpClient,
    create_default_http_client,
    resolve_retry_policy,
)
from .log import setup_logging
from .probe import ProbeClient, ProbeOutcome
from .runtime import ProbeResult, ProbeRunner, run_identity_probe, run_liveness_probe
from .targets import ProbeTarget, build_identity_target, build_liveness_target
from .validation import validate_outcome
from .version import __version__

__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpxClient",
    "ProbeClient",
    "ProbeError",
    "ProbeOutcome",
    "ProbeResult",
    "ProbeRunner",
    "ProbeSettings",
    "ProbeTarget",
    "ProtocolError",
    "RetryPolicy",
    "SemanticError",
    "StubHttpClient",
    "TransportError",
    "build_identity_target",
    "build_liveness_target",
    "create_default_http_client",
    "load_probe_settings",
    "resolve_retry_policy",
    "run_identity_probe",
    "run_liveness_probe",
    "setup_logging",
    "validate_outcome",
    "__version__",
]
