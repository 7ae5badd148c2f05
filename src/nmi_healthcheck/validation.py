# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Health classification of a completed probe exchange."""

from __future__ import annotations

from .errors import ProtocolError, SemanticError
from .probe import ProbeOutcome
from .targets import ProbeTarget

HTTP_OK = 200


def validate_outcome(outcome: ProbeOutcome, target: ProbeTarget) -> None:
    """
    Raise when the exchange does not prove the endpoint healthy.

    Any status other than 200 is a ProtocolError, whatever the body. With a 200,
    targets that declare `expected_body` must return exactly those bytes (no
    trimming or case folding) or a SemanticError is raised; targets without one
    are healthy on status alone.
    """
    if outcome.status_code != HTTP_OK:
        raise ProtocolError(outcome.status_code, target=target.name)

    if target.expected_body is None:
        return

    if outcome.body != target.expected_body:
        raise SemanticError(
            outcome.body.decode("utf-8", errors="replace"),
            expected=target.expected_body.decode("utf-8", errors="replace"),
            target=target.name,
        )


__all__ = ["validate_outcome"]
