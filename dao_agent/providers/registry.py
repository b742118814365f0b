"""Provider 与模型配置。

模型 ID、温度、最大输出长度都是按 Provider 固定的配置，不受请求控制，
便于审计与复现。升级或切换模型只需改这里。"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class ModelConfig:
    """单个 Provider 使用的模型配置。"""

    provider_model: str
    max_tokens: int
    temperature: Optional[float] = None


@dataclass(frozen=True)
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    path: str
    model: ModelConfig
    # Credentials 上对应凭据的字段名
    credential_field: str
    headers: Dict[str, str] = field(default_factory=dict)


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    base_url="https://api.openai.com/v1",
    path="/chat/completions",
    model=ModelConfig(provider_model="gpt-4o-mini", max_tokens=1000, temperature=0.7),
    credential_field="openai_api_key",
)

# Anthropic Messages API：system prompt 走顶层字段，鉴权走 x-api-key
ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    base_url="https://api.anthropic.com/v1",
    path="/messages",
    model=ModelConfig(provider_model="claude-3-haiku-20240307", max_tokens=1000),
    credential_field="anthropic_api_key",
    headers={"anthropic-version": "2023-06-01"},
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
    "anthropic": ANTHROPIC_CONFIG,
}

# 多个凭据同时存在时，排在前面的 Provider 胜出
PROVIDER_PRECEDENCE = ("openai", "anthropic")


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
