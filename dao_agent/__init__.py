"""DAO Agent 顶层包。

该包提供 DAO 治理问答助手的核心实现，
包括客户端会话状态、DAO 上下文映射、系统提示词构建、
多 Provider 网关以及对外的请求边界。
"""

from dao_agent.agents.dao_helper_agent import DaoHelperAgent
from dao_agent.api.service import AgentEndpoint
from dao_agent.domain.context import bind_project_context, clear_context
from dao_agent.domain.conversation import ConversationStore
from dao_agent.domain.models import DomainContext
from dao_agent.prompts import build_system_prompt
from dao_agent.providers.gateway import ProviderGateway

__all__ = [
    "AgentEndpoint",
    "ConversationStore",
    "DaoHelperAgent",
    "DomainContext",
    "ProviderGateway",
    "bind_project_context",
    "build_system_prompt",
    "clear_context",
]
