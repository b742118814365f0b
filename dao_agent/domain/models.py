"""统一的请求、结果与领域上下文数据模型。

本模块定义了 Gateway 在不同 Provider 之间共享的标准数据结构：

- ChatMessage: 一条发给 Provider 的历史消息（仅 user/assistant）。
- GatewayRequest: 发给 ProviderGateway 的完整请求。
- GatewaySuccess / GatewayFailure: Gateway 唯一对外暴露的结果形态。
- DomainContext: 当前 DAO 项目的上下文快照，注入到 system prompt。

所有 Provider 适配器都只依赖这些模型，厂商自己的 JSON 结构不得越过 Gateway。
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

# 会话消息角色；system 只存在于会话记录里，不会作为历史发给 Provider
Role = Literal["user", "assistant", "system"]
HistoryRole = Literal["user", "assistant"]


@dataclass
class ChatMessage:
    """一条历史消息。"""

    role: HistoryRole
    content: str

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class GatewayRequest:
    """一次完整的补全请求。

    - system_prompt: 由 PromptComposer 生成的系统提示词。
    - history: 按会话顺序排列的历史消息，不含 system 角色。
    """

    system_prompt: str
    history: List[ChatMessage] = field(default_factory=list)


class FailureKind(str, Enum):
    UNCONFIGURED = "Unconfigured"
    UPSTREAM_ERROR = "UpstreamError"
    TRANSPORT_ERROR = "TransportError"


@dataclass(frozen=True)
class GatewaySuccess:
    text: str
    provider: str
    ok: Literal[True] = True


@dataclass(frozen=True)
class GatewayFailure:
    kind: FailureKind
    detail: str = ""
    provider: Optional[str] = None
    ok: Literal[False] = False


GatewayResult = Union[GatewaySuccess, GatewayFailure]


@dataclass(frozen=True)
class Credentials:
    """进程配置中解析出的凭据集合，两者均可缺省。"""

    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    @classmethod
    def from_settings(cls, cfg) -> "Credentials":
        return cls(
            openai_api_key=getattr(cfg, "openai_api_key", None) or None,
            anthropic_api_key=getattr(cfg, "anthropic_api_key", None) or None,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.openai_api_key or self.anthropic_api_key)

    def secrets(self) -> List[str]:
        return [k for k in (self.openai_api_key, self.anthropic_api_key) if k]


# dataclass 字段名 -> 前端/接口使用的 camelCase 键名
_CONTEXT_WIRE_KEYS = {
    "project_id": "projectId",
    "project_name": "projectName",
    "token_symbol": "tokenSymbol",
    "total_supply": "totalSupply",
    "current_proposals": "currentProposals",
    "voting_rounds": "votingRounds",
    "user_balance": "userBalance",
    "user_address": "userAddress",
}


@dataclass(frozen=True)
class DomainContext:
    """DAO 项目的上下文快照。

    所有字段都可缺省；缺省字段在序列化时直接省略，而不是输出占位字符串。
    这是一次性快照，调用方在页面切换时负责刷新。
    """

    project_id: Optional[str] = None
    project_name: Optional[str] = None
    token_symbol: Optional[str] = None
    total_supply: Optional[str] = None
    current_proposals: Optional[List[Any]] = None
    voting_rounds: Optional[List[Any]] = None
    user_balance: Optional[float] = None
    user_address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """转换为 camelCase 字典，省略缺省字段。"""

        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out[_CONTEXT_WIRE_KEYS[f.name]] = value
        return out

    def is_empty(self) -> bool:
        return not self.to_dict()
