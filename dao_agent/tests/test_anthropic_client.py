import httpx
import pytest

from dao_agent.domain.exceptions import TransportError, UpstreamError
from dao_agent.domain.models import ChatMessage, GatewayRequest
from dao_agent.providers.anthropic_client import AnthropicClient


class SettingsStub:
    http_timeout = 2.0
    anthropic_base_url = "https://api.anthropic.com/v1/"


def _request():
    return GatewayRequest(system_prompt="sys", history=[ChatMessage(role="user", content="hi")])


def _fake_client(captured, status_code=200, body=None, text="", exc=None):
    class Resp:
        def __init__(self):
            self.status_code = status_code
            self.text = text

        def json(self):
            return body

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, headers=None, **_):
            captured["url"] = url
            captured["payload"] = json
            captured["headers"] = headers
            if exc is not None:
                raise exc
            return Resp()

    return Client


def test_anthropic_payload_and_parse(monkeypatch):
    captured = {}
    body = {"content": [{"type": "text", "text": "Hello"}]}
    monkeypatch.setattr("httpx.Client", _fake_client(captured, body=body))
    text = AnthropicClient("ak-test", SettingsStub()).complete(_request())
    assert text == "Hello"
    assert captured["url"] == "https://api.anthropic.com/v1/messages"
    headers = captured["headers"]
    assert headers["x-api-key"] == "ak-test"
    assert headers["anthropic-version"] == "2023-06-01"
    assert "Authorization" not in headers
    assert captured["payload"] == {
        "model": "claude-3-haiku-20240307",
        "max_tokens": 1000,
        "system": "sys",
        "messages": [{"role": "user", "content": "hi"}],
    }


def test_anthropic_non_2xx_is_upstream_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", _fake_client({}, status_code=401, text='{"error": "bad key"}'))
    with pytest.raises(UpstreamError) as ei:
        AnthropicClient("ak-test", SettingsStub()).complete(_request())
    assert ei.value.message == '{"error": "bad key"}'


def test_anthropic_timeout_is_transport_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", _fake_client({}, exc=httpx.ReadTimeout("timed out")))
    with pytest.raises(TransportError):
        AnthropicClient("ak-test", SettingsStub()).complete(_request())


def test_anthropic_missing_text_is_transport_error(monkeypatch):
    monkeypatch.setattr("httpx.Client", _fake_client({}, body={"content": [{"type": "tool_use"}]}))
    with pytest.raises(TransportError):
        AnthropicClient("ak-test", SettingsStub()).complete(_request())
