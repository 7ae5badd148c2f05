# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from enum import Enum

import httpx


class ErrorKind(str, Enum):
    CONFIGURATION = "ConfigurationError"
    TRANSPORT = "TransportError"
    PROTOCOL = "ProtocolError"
    SEMANTIC = "SemanticError"


class TransportCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class ProbeError(Exception):
    """Base class for every terminal probe failure."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def describe(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ConfigurationError(ProbeError):
    """Bad or missing input, detected before any network I/O."""

    kind = ErrorKind.CONFIGURATION


class TransportError(ProbeError):
    """Network-level failure that survived every retry."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        category: TransportCategory = TransportCategory.UNKNOWN_ERROR,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.category = category
        self.attempts = attempts


class ProtocolError(ProbeError):
    """The endpoint answered, but not with HTTP 200."""

    kind = ErrorKind.PROTOCOL

    def __init__(self, status_code: int, target: str = "probe endpoint"):
        super().__init__(f"request to the {target} failed with http error code: {status_code}")
        self.status_code = status_code


class SemanticError(ProbeError):
    """HTTP 200, but the body does not match the health contract."""

    kind = ErrorKind.SEMANTIC

    def __init__(self, body: str, expected: str, target: str = "probe endpoint"):
        super().__init__(f"request to the {target} failed, the message content was: {body}, expected '{expected}'")
        self.body = body
        self.expected = expected


def categorize_exception(exc: BaseException) -> TransportCategory:
    """
    Map Python/httpx exceptions to TransportCategory.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportCategory.TIMEOUT

    # httpx wraps the underlying socket error; look through the chain for DNS/TLS causes.
    seen: set[int] = set()
    cause: BaseException | None = exc
    while cause is not None and id(cause) not in seen:
        seen.add(id(cause))
        if isinstance(cause, (socket.gaierror, socket.herror)):
            return TransportCategory.DNS_ERROR
        if isinstance(cause, (ssl_module.SSLError, ssl_module.CertificateError)):
            return TransportCategory.SSL_ERROR
        cause = cause.__cause__ or cause.__context__

    if isinstance(exc, (httpx.ConnectError, httpx.RemoteProtocolError, httpx.NetworkError, httpx.ProxyError)):
        return TransportCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return TransportCategory.CONNECTION_ERROR

    return TransportCategory.UNKNOWN_ERROR


def category_to_reason(category: TransportCategory | None) -> str:
    """User-facing reason string."""
    mapping = {
        TransportCategory.TIMEOUT: "Network timeout while calling the endpoint",
        TransportCategory.SSL_ERROR: "TLS/certificate issue",
        TransportCategory.CONNECTION_ERROR: "Network connectivity issue",
        TransportCategory.DNS_ERROR: "DNS resolution failure",
        TransportCategory.UNKNOWN_ERROR: "Network error while calling the endpoint",
        None: "",
    }
    return mapping.get(category, "Probe failed due to network error")


__all__ = [
    "ConfigurationError",
    "ErrorKind",
    "ProbeError",
    "ProtocolError",
    "SemanticError",
    "TransportCategory",
    "TransportError",
    "categorize_exception",
    "category_to_reason",
]
