# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Duration strings in the Go `time.ParseDuration` format.

Probe manifests already carry values such as `10s`, `1m30s` or `250ms`, so the
same grammar is accepted here: an optional sign followed by one or more
`<decimal><unit>` pairs, or the bare string `0`.
"""

from __future__ import annotations

import re

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT_RE = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a Go-style duration and return it in seconds.

    Raises ValueError when the string does not match the grammar.
    """
    text = value
    sign = 1.0
    if text[:1] in {"-", "+"}:
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]
    if text == "0":
        return 0.0
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    total = 0.0
    pos = 0
    while pos < len(text):
        match = _COMPONENT_RE.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration: {value!r}")
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        pos = match.end()
    return sign * total


def format_duration(seconds: float) -> str:
    """Render seconds compactly for log and error messages (e.g. `10s`, `1.5s`)."""
    if seconds == int(seconds):
        return f"{int(seconds)}s"
    return f"{seconds:g}s"


__all__ = ["format_duration", "parse_duration"]
