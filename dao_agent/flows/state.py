"""State definition for the endpoint LangGraph pipeline."""

from __future__ import annotations

from typing import Any, Dict, List, TypedDict

from dao_agent.domain.models import ChatMessage, Credentials, GatewayResult


class EndpointState(TypedDict, total=False):
    """State shared across the request pipeline nodes.

    A node that sets ``status`` ends the pipeline; ``body`` is the JSON reply.
    """

    payload: Any
    history: List[ChatMessage]
    dao_context: Any
    credentials: Credentials
    system_prompt: str
    result: GatewayResult
    status: int
    body: Dict[str, Any]
