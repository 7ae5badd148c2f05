# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from nmi_healthcheck.cli.main import build_identity_parser, build_liveness_parser, identity_main, liveness_main
from nmi_healthcheck.config import ProbeSettings
from nmi_healthcheck.errors import ConfigurationError, ProtocolError, SemanticError, TransportError
from nmi_healthcheck.http import StubHttpClient, transport_failure
from nmi_healthcheck.http.models import HttpResponse
from nmi_healthcheck.runtime import ProbeRunner, run_identity_probe, run_liveness_probe

PROBE_ENV_VARS = (
    "HOST_IP",
    "HTTP_RETRY_COUNT",
    "HTTP_RETRY_MIN_SECONDS",
    "HTTP_RETRY_MAX_SECONDS",
    "HTTP_TIMEOUT",
    "IDENTITY_ENDPOINT",
    "IDENTITY_RESOURCE",
    "IDENTITY_API_VERSION",
)


def _no_sleep(_delay: float) -> None:
    return None


def _settings(**overrides) -> ProbeSettings:
    values = {"host_ip": "192.168.1.1", "retry_min": "0", "retry_max": "0"}
    values.update(overrides)
    return ProbeSettings(**values)


class ClosingStub(StubHttpClient):
    def __init__(self, responses):
        super().__init__(responses)
        self.closed = False

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch):
    for name in PROBE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_liveness_probe_succeeds_when_nmi_answers_active():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Active")])
    result = run_liveness_probe(_settings(), client, sleep=_no_sleep)
    assert result.healthy is True
    assert result.exit_code == 0
    assert result.error is None
    assert client.requests[0].url == "http://192.168.1.1:8085/healthz"


def test_liveness_probe_fails_when_nmi_answers_not_active():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Not Active")])
    result = run_liveness_probe(_settings(), client, sleep=_no_sleep)
    assert result.healthy is False
    assert result.exit_code == 1
    assert isinstance(result.error, SemanticError)
    assert "Not Active" in result.message


def test_liveness_probe_fails_on_http_error_code():
    client = StubHttpClient([HttpResponse(ok=True, status_code=400)])
    result = run_liveness_probe(_settings(), client, sleep=_no_sleep)
    assert isinstance(result.error, ProtocolError)
    assert result.error.status_code == 400
    assert result.message.startswith("ProtocolError: ")


def test_liveness_probe_missing_host_fails_before_any_call():
    client = StubHttpClient([HttpResponse(ok=True, status_code=400)])
    result = run_liveness_probe(_settings(host_ip=None), client, sleep=_no_sleep)
    assert isinstance(result.error, ConfigurationError)
    assert "HOST_IP" in result.message
    assert client.calls == 0


def test_missing_host_is_reported_before_retry_configuration_errors():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Active")])
    result = run_liveness_probe(_settings(host_ip=None, retry_count="this is wrong"), client, sleep=_no_sleep)
    assert isinstance(result.error, ConfigurationError)
    assert "HOST_IP" in result.message
    assert client.calls == 0


def test_bad_retry_configuration_fails_before_any_call():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Active")])
    result = run_liveness_probe(_settings(retry_count="this is wrong"), client, sleep=_no_sleep)
    assert isinstance(result.error, ConfigurationError)
    assert "HTTP_RETRY_COUNT" in result.message
    assert client.calls == 0


def test_liveness_probe_retries_transport_failures_then_reports_transport_error():
    delays: list[float] = []
    client = StubHttpClient([transport_failure("connection refused")])
    settings = _settings(retry_count="3", retry_min="1s", retry_max="4s")
    result = run_liveness_probe(settings, client, sleep=delays.append)
    assert isinstance(result.error, TransportError)
    assert client.calls == 3
    assert delays == [1.0, 2.0]


def test_identity_probe_accepts_200_and_sends_metadata_header():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b'{"access_token": "redacted"}')])
    result = run_identity_probe(ProbeSettings(retry_min="0", retry_max="0"), client, sleep=_no_sleep)
    assert result.healthy is True
    assert client.requests[0].headers == {"Metadata": "true"}
    assert client.requests[0].url.startswith("http://169.254.169.254/metadata/identity/oauth2/token?")


def test_identity_probe_does_not_need_host_ip():
    client = StubHttpClient([HttpResponse(ok=True, status_code=403)])
    result = run_identity_probe(ProbeSettings(host_ip=None, retry_min="0", retry_max="0"), client, sleep=_no_sleep)
    assert isinstance(result.error, ProtocolError)
    assert client.calls == 1


def test_identity_probe_rejects_malformed_endpoint():
    client = StubHttpClient([HttpResponse(ok=True, status_code=200)])
    result = run_identity_probe(ProbeSettings(identity_endpoint="not a url"), client, sleep=_no_sleep)
    assert isinstance(result.error, ConfigurationError)
    assert client.calls == 0


def test_runner_closes_the_client_it_creates(monkeypatch):
    created = ClosingStub([HttpResponse(ok=True, status_code=200, content=b"Active")])
    monkeypatch.setattr("nmi_healthcheck.runtime.create_default_http_client", lambda settings: created)
    result = ProbeRunner(_settings(), sleep=_no_sleep).check_liveness()
    assert result.healthy is True
    assert created.closed is True


def test_runner_leaves_injected_client_open():
    injected = ClosingStub([HttpResponse(ok=True, status_code=200, content=b"Active")])
    ProbeRunner(_settings(), injected, sleep=_no_sleep).check_liveness()
    assert injected.closed is False


def test_parsers_take_no_options():
    assert vars(build_liveness_parser().parse_args([])) == {}
    assert vars(build_identity_parser().parse_args([])) == {}


def test_liveness_main_prints_success(clean_env, capsys):
    clean_env.setenv("HOST_IP", "192.168.1.1")
    stub = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Active")])
    clean_env.setattr("nmi_healthcheck.runtime.create_default_http_client", lambda settings: stub)
    assert liveness_main([]) == 0
    captured = capsys.readouterr()
    assert "successful" in captured.out
    assert captured.err == ""


def test_liveness_main_reports_missing_host(clean_env, capsys):
    stub = StubHttpClient([HttpResponse(ok=True, status_code=200, content=b"Active")])
    clean_env.setattr("nmi_healthcheck.runtime.create_default_http_client", lambda settings: stub)
    assert liveness_main([]) == 1
    captured = capsys.readouterr()
    assert captured.err.startswith("ConfigurationError: ")
    assert "HOST_IP" in captured.err
    assert stub.calls == 0


def test_identity_main_reports_protocol_error(clean_env, capsys):
    stub = StubHttpClient([HttpResponse(ok=True, status_code=500)])
    clean_env.setattr("nmi_healthcheck.runtime.create_default_http_client", lambda settings: stub)
    assert identity_main([]) == 1
    assert "ProtocolError" in capsys.readouterr().err


class ExplodingClient:
    def __init__(self):
        self.calls = 0

    def request(self, request):  # noqa: ARG002
        self.calls += 1
        raise OSError("socket exploded")


def test_raising_client_becomes_transport_error_result():
    client = ExplodingClient()
    result = run_liveness_probe(_settings(retry_count="2"), client, sleep=_no_sleep)
    assert isinstance(result.error, TransportError)
    assert result.message.startswith("TransportError: ")
    assert "socket exploded" in result.message
    assert client.calls == 2


def test_response_without_status_becomes_transport_error_result():
    client = StubHttpClient([HttpResponse(ok=True)])
    result = run_liveness_probe(_settings(retry_count="2"), client, sleep=_no_sleep)
    assert isinstance(result.error, TransportError)
    assert client.calls == 2


def test_non_ascii_user_agent_is_a_configuration_error():
    result = run_liveness_probe(_settings(user_agent="agenté/1.0"), sleep=_no_sleep)
    assert isinstance(result.error, ConfigurationError)
    assert "NMI_HEALTHCHECK_USER_AGENT" in result.message
