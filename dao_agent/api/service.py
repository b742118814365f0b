"""对外 API 服务模块。

AgentEndpoint 是请求边界：校验请求体、生成 system prompt、调用 Gateway，
最终返回 (状态码, JSON body)。它在多次调用之间不保存任何状态。
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from dao_agent.config.settings import settings as default_settings
from dao_agent.flows.graph import FAILED_TO_PROCESS, build_graph
from dao_agent.infrastructure.logging.logger import logger
from dao_agent.providers.gateway import ProviderGateway


@dataclass(frozen=True)
class EndpointResponse:
    status: int
    body: Dict[str, Any]


class AgentEndpoint:
    def __init__(self, settings=None, gateway: Optional[ProviderGateway] = None):
        self._settings = settings or default_settings
        self._gateway = gateway or ProviderGateway(self._settings)
        self._graph = build_graph(self._gateway, self._settings)

    def handle(self, payload: Any) -> EndpointResponse:
        """处理一次请求。

        Args:
            payload: 已解析的 JSON 请求体，形如 {"messages": [...], "daoContext": {...}}

        Returns:
            EndpointResponse；任何异常都会被转换为 500 响应，不会向外抛出。
        """
        try:
            result = self._graph.invoke({"payload": payload})
            return EndpointResponse(status=result["status"], body=result["body"])
        except Exception as e:
            logger.exception("DAO agent request failed", extra={"extra": {"error": type(e).__name__}})
            body: Dict[str, Any] = {"error": FAILED_TO_PROCESS}
            if self._settings.should_expose_error_detail:
                body["details"] = "Unknown error"
            return EndpointResponse(status=500, body=body)


_endpoint: Optional[AgentEndpoint] = None


def get_default_endpoint() -> AgentEndpoint:
    """获取默认的 AgentEndpoint 实例（单例）。"""
    global _endpoint
    if _endpoint is None:
        _endpoint = AgentEndpoint()
    return _endpoint
