"""DAO 助手的客户端会话驱动。

把一次用户提交串成完整流程：
用户消息 -> 助手占位消息(loading) -> 请求 endpoint -> 填充占位消息或记录错误。

请求发出时记录 store 的 generation，响应回来时若会话已被 reset/clear，
直接丢弃该响应，不会写进新的会话。
"""

from typing import Any, Dict, List, Optional, Protocol

import httpx

from dao_agent.api.service import AgentEndpoint, EndpointResponse
from dao_agent.domain.conversation import ConversationStore, Message
from dao_agent.flows.graph import FAILED_TO_PROCESS
from dao_agent.infrastructure.logging.logger import logger


class AgentTransport(Protocol):
    """把请求体送到 endpoint 并带回 (状态码, body)。"""

    def send(self, payload: Dict[str, Any]) -> EndpointResponse:
        ...

    def close(self) -> None:
        ...


class EndpointTransport:
    """进程内直接调用 AgentEndpoint。"""

    def __init__(self, endpoint: AgentEndpoint):
        self._endpoint = endpoint

    def send(self, payload: Dict[str, Any]) -> EndpointResponse:
        return self._endpoint.handle(payload)

    def close(self) -> None:
        pass


class HttpTransport:
    """通过 HTTP POST 调用远端 endpoint。

    close() 会关闭底层连接池，尽力中止仍在进行中的请求。
    """

    def __init__(self, url: str, timeout: float = 60.0):
        self._url = url
        self._client = httpx.Client(timeout=timeout, trust_env=False)

    def send(self, payload: Dict[str, Any]) -> EndpointResponse:
        try:
            resp = self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            return EndpointResponse(status=0, body={"error": FAILED_TO_PROCESS, "details": str(e)})
        try:
            body = resp.json()
        except ValueError:
            body = {"error": FAILED_TO_PROCESS}
        if not isinstance(body, dict):
            body = {"error": FAILED_TO_PROCESS}
        return EndpointResponse(status=resp.status_code, body=body)

    def close(self) -> None:
        self._client.close()


class DaoHelperAgent:
    """驱动 ConversationStore 的会话对象。

    同一时间只应有一个进行中的 submit（UI 在 is_loading 时禁用输入），
    这里不加锁，只保证迟到的响应不会污染新会话。
    """

    def __init__(self, store: ConversationStore, transport: AgentTransport):
        self._store = store
        self._transport = transport
        self._in_flight = 0

    @property
    def store(self) -> ConversationStore:
        return self._store

    def submit(self, text: str) -> Optional[Message]:
        """提交一条用户消息，返回填充后的助手消息；输入为空或响应被丢弃时返回 None。"""

        text = (text or "").strip()
        if not text:
            return None

        self._store.add_message("user", text)
        payload = self._build_payload()
        placeholder = self._store.add_message("assistant", "", loading=True)
        generation = self._store.generation
        self._store.set_loading(True)
        self._in_flight += 1
        try:
            response = self._transport.send(payload)
        except Exception as e:
            logger.exception("agent.transport_failed")
            response = EndpointResponse(status=0, body={"error": FAILED_TO_PROCESS, "details": str(e)})
        finally:
            self._in_flight -= 1

        try:
            return self._apply_response(placeholder, generation, response)
        finally:
            if self._in_flight == 0 and self._store.state.is_loading:
                self._store.set_loading(False)

    def teardown(self) -> None:
        """面板销毁：关闭传输层并重置会话。"""

        self._transport.close()
        self._store.reset()

    def _build_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"messages": self._history()}
        context = self._store.state.context
        if context is not None and not context.is_empty():
            payload["daoContext"] = context.to_dict()
        return payload

    def _history(self) -> List[Dict[str, str]]:
        return [
            {"role": m.role, "content": m.content}
            for m in self._store.state.messages
            if m.role in ("user", "assistant") and not m.loading and not m.error
        ]

    def _apply_response(
        self,
        placeholder: Message,
        generation: int,
        response: EndpointResponse,
    ) -> Optional[Message]:
        messages = self._store.state.messages
        if self._store.generation != generation or not messages or messages[-1].id != placeholder.id:
            logger.info("agent.late_response_discarded", extra={"extra": {"status": response.status}})
            return None

        body = response.body
        message = body.get("message")
        if response.status == 200 and isinstance(message, str):
            self._store.update_last_message(content=message, loading=False)
        else:
            error = body.get("details") or body.get("error") or FAILED_TO_PROCESS
            self._store.update_last_message(error=str(error), loading=False)
        return self._store.state.messages[-1]
