"""Anthropic Provider 适配器。

与 OpenAI 的差异：
- URL: {base_url}/messages
- 认证: x-api-key: <api_key>，另需 anthropic-version 头。
- system prompt 放在顶层 system 字段，messages 里只保留 user/assistant 历史。
- 回复文本位于 content[0].text。
"""

from typing import Any, Dict

import httpx

from dao_agent.domain.exceptions import TransportError, UpstreamError
from dao_agent.domain.models import GatewayRequest
from dao_agent.providers.registry import ANTHROPIC_CONFIG, ProviderConfig


class AnthropicClient:
    """Anthropic 客户端实现。"""

    name = "anthropic"

    def __init__(self, api_key: str, settings, config: ProviderConfig = ANTHROPIC_CONFIG):
        self._api_key = api_key
        self._settings = settings
        self._config = config

    def complete(self, req: GatewayRequest) -> str:
        payload = self._build_payload(req)
        base = getattr(self._settings, "anthropic_base_url", None) or self._config.base_url
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    f"{base.rstrip('/')}{self._config.path}",
                    json=payload,
                    headers={
                        "x-api-key": self._api_key,
                        "Content-Type": "application/json",
                        **self._config.headers,
                    },
                )
        except httpx.HTTPError as e:
            raise TransportError(message=str(e) or e.__class__.__name__, provider=self.name)
        if not 200 <= resp.status_code < 300:
            raise UpstreamError(message=resp.text, upstream_status=resp.status_code, provider=self.name)
        return self._parse_response(resp)

    def _build_payload(self, req: GatewayRequest) -> Dict[str, Any]:
        model_cfg = self._config.model
        return {
            "model": model_cfg.provider_model,
            "max_tokens": model_cfg.max_tokens,
            "system": req.system_prompt,
            "messages": [m.to_payload() for m in req.history],
        }

    def _parse_response(self, resp) -> str:
        try:
            data = resp.json()
            text = data["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TransportError(message=f"Unexpected Anthropic response: {e!r}", provider=self.name)
        if not isinstance(text, str):
            raise TransportError(message="Anthropic response has no text content", provider=self.name)
        return text
