# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Probe commands for orchestrator exec probes and init containers.

Both commands take their configuration from environment variables only and
exit 0 when the endpoint is healthy, 1 otherwise.
"""

import argparse
import sys

from ..config import load_probe_settings
from ..log import setup_logging
from ..runtime import ProbeResult, run_identity_probe, run_liveness_probe


def build_liveness_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="nmi-liveness-probe",
        description=(
            "Check that the NMI on this node answers 'Active' on http://$HOST_IP:8085/healthz. "
            "Retries are tuned with HTTP_RETRY_COUNT, HTTP_RETRY_MIN_SECONDS and HTTP_RETRY_MAX_SECONDS."
        ),
    )


def build_identity_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="identity-token-probe",
        description=(
            "Check that an identity token can be requested from the metadata endpoint "
            "(IDENTITY_ENDPOINT, IDENTITY_RESOURCE). Retries are tuned like nmi-liveness-probe."
        ),
    )


def _report(result: ProbeResult) -> int:
    if result.healthy:
        print(result.message)
    else:
        print(result.message, file=sys.stderr)
    return result.exit_code


def liveness_main(argv: list[str] | None = None) -> int:
    build_liveness_parser().parse_args(argv)
    setup_logging()
    return _report(run_liveness_probe(load_probe_settings()))


def identity_main(argv: list[str] | None = None) -> int:
    build_identity_parser().parse_args(argv)
    setup_logging()
    return _report(run_identity_probe(load_probe_settings()))


main = liveness_main


if __name__ == "__main__":
    raise SystemExit(main())
