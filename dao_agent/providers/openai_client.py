"""OpenAI Provider 适配器。

本模块负责：

1. 接收统一的 GatewayRequest。
2. 将其转换为 Chat Completions 请求：system prompt 作为 messages 的第一条。
3. 调用 HTTP 接口，非 2xx 时把原始响应体包装为 UpstreamError。
4. 从 choices[0].message.content 取出回复文本。
"""

from typing import Any, Dict

import httpx

from dao_agent.domain.exceptions import TransportError, UpstreamError
from dao_agent.domain.models import GatewayRequest
from dao_agent.providers.registry import OPENAI_CONFIG, ProviderConfig


class OpenAIClient:
    """OpenAI 客户端实现（Bearer 鉴权）。"""

    name = "openai"

    def __init__(self, api_key: str, settings, config: ProviderConfig = OPENAI_CONFIG):
        self._api_key = api_key
        self._settings = settings
        self._config = config

    def complete(self, req: GatewayRequest) -> str:
        payload = self._build_payload(req)
        base = getattr(self._settings, "openai_base_url", None) or self._config.base_url
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    f"{base.rstrip('/')}{self._config.path}",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                        **self._config.headers,
                    },
                )
        except httpx.HTTPError as e:
            # 网络错误：DNS 失败、连接超时、读超时等
            raise TransportError(message=str(e) or e.__class__.__name__, provider=self.name)
        if not 200 <= resp.status_code < 300:
            raise UpstreamError(message=resp.text, upstream_status=resp.status_code, provider=self.name)
        return self._parse_response(resp)

    def _build_payload(self, req: GatewayRequest) -> Dict[str, Any]:
        model_cfg = self._config.model
        return {
            "model": model_cfg.provider_model,
            "messages": [{"role": "system", "content": req.system_prompt}]
            + [m.to_payload() for m in req.history],
            "temperature": model_cfg.temperature,
            "max_tokens": model_cfg.max_tokens,
        }

    def _parse_response(self, resp) -> str:
        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise TransportError(message=f"Unexpected OpenAI response: {e!r}", provider=self.name)
        if not isinstance(content, str):
            raise TransportError(message="OpenAI response has no text content", provider=self.name)
        return content
