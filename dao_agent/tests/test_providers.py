from dao_agent.domain.models import Credentials
from dao_agent.providers import Backend, create_provider, select_backend
from dao_agent.providers.anthropic_client import AnthropicClient
from dao_agent.providers.openai_client import OpenAIClient
from dao_agent.providers.registry import PROVIDER_PRECEDENCE, get_provider_config


class SettingsStub:
    http_timeout = 1.0


def test_select_backend_prefers_openai():
    backend = select_backend(Credentials(openai_api_key="o", anthropic_api_key="a"))
    assert backend == Backend(name="openai", api_key="o")


def test_select_backend_falls_back_to_anthropic():
    backend = select_backend(Credentials(anthropic_api_key="a"))
    assert backend == Backend(name="anthropic", api_key="a")


def test_select_backend_without_credentials():
    assert select_backend(Credentials()) is None


def test_backend_repr_hides_key():
    assert "secret" not in repr(Backend(name="openai", api_key="secret"))


def test_create_provider_per_variant():
    assert isinstance(create_provider(Backend("openai", "o"), SettingsStub()), OpenAIClient)
    assert isinstance(create_provider(Backend("anthropic", "a"), SettingsStub()), AnthropicClient)


def test_credentials_from_settings_ignores_blank():
    class S:
        openai_api_key = ""
        anthropic_api_key = "a"

    creds = Credentials.from_settings(S())
    assert creds.openai_api_key is None
    assert creds.is_configured
    assert creds.secrets() == ["a"]


def test_registry_lookup_is_case_insensitive():
    assert get_provider_config("OpenAI").model.provider_model == "gpt-4o-mini"


def test_create_provider_passes_registry_config():
    client = create_provider(Backend("anthropic", "a"), SettingsStub())
    assert client._config is get_provider_config("anthropic")


def test_select_backend_reads_registry_credential_field():
    for name in PROVIDER_PRECEDENCE:
        cfg = get_provider_config(name)
        creds = Credentials(**{cfg.credential_field: "k-" + name})
        assert select_backend(creds) == Backend(name=cfg.name, api_key="k-" + name)
