"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供各厂商的具体实现 (openai_client、anthropic_client)。
- 按凭据选择 Provider 并归一化结果 (gateway)。
"""

from dataclasses import dataclass
from typing import Callable, Dict, Literal, Optional

from dao_agent.domain.models import Credentials
from dao_agent.providers.anthropic_client import AnthropicClient
from dao_agent.providers.base import ProviderClient
from dao_agent.providers.openai_client import OpenAIClient
from dao_agent.providers.registry import (
    ANTHROPIC_CONFIG,
    OPENAI_CONFIG,
    PROVIDER_PRECEDENCE,
    get_provider_config,
)

BackendName = Literal["openai", "anthropic"]


@dataclass(frozen=True)
class Backend:
    """已选定的 Provider 及其凭据。"""

    name: BackendName
    api_key: str

    def __repr__(self) -> str:
        return f"Backend(name={self.name!r}, api_key='***')"


# Provider 名 -> 客户端实现；名称、凭据字段、模型参数都来自 registry
_CLIENTS: Dict[str, Callable[..., ProviderClient]] = {
    OPENAI_CONFIG.name: OpenAIClient,
    ANTHROPIC_CONFIG.name: AnthropicClient,
}


def select_backend(credentials: Credentials) -> Optional[Backend]:
    """按固定优先级选出第一个配置了凭据的 Provider，都没有时返回 None。"""

    for name in PROVIDER_PRECEDENCE:
        cfg = get_provider_config(name)
        key = getattr(credentials, cfg.credential_field, None)
        if key:
            return Backend(name=cfg.name, api_key=key)
    return None


def create_provider(backend: Backend, settings) -> ProviderClient:
    """为选中的 Backend 创建对应的客户端实例，并传入其 registry 配置。"""

    cfg = get_provider_config(backend.name)
    return _CLIENTS[cfg.name](backend.api_key, settings, cfg)
