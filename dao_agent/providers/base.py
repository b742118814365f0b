"""Provider 抽象接口。

Gateway 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 OpenAIClient、AnthropicClient）。
- 负责：将 GatewayRequest 转成具体 API 请求，并从响应 JSON 中取出回复文本。
- 失败时抛出 domain.exceptions 中的 UpstreamError / TransportError，
  由 ProviderGateway 统一转换为 GatewayFailure。

这样可以在不改 Gateway 代码的前提下接入更多厂商。
"""

from typing import Protocol

from dao_agent.domain.models import GatewayRequest


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - complete(req): 执行一次非流式调用，只发出一次 HTTP 请求，返回回复文本。
    """

    name: str

    def complete(self, req: GatewayRequest) -> str:
        ...
