"""LangGraph construction and node implementations for the agent endpoint.

validate_payload -> resolve_credentials -> compose_prompt -> call_gateway -> END.
Client input and configuration problems end the graph before any outbound call.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from dao_agent.domain.exceptions import ClientInputError, ConfigurationError
from dao_agent.domain.models import ChatMessage, Credentials, GatewayRequest, GatewaySuccess
from dao_agent.flows.state import EndpointState
from dao_agent.infrastructure.logging.logger import logger
from dao_agent.prompts import build_system_prompt
from dao_agent.providers.gateway import ProviderGateway

FAILED_TO_PROCESS = "Failed to process request"

_ALLOWED_ROLES = {"user", "assistant", "system"}


def _error_state(err: ClientInputError | ConfigurationError) -> Dict[str, Any]:
    return {"status": err.http_status, "body": {"error": err.message}}


def parse_history(messages: Any, strict: bool = False) -> List[ChatMessage]:
    """Turn inbound messages into gateway history, dropping system entries.

    ``messages`` must be a list, otherwise ClientInputError is raised. Entries
    that are not ``{role: user|assistant|system, content: str}`` objects are
    skipped, or rejected with ClientInputError when ``strict`` is set.
    """

    if not isinstance(messages, list):
        raise ClientInputError()
    history: List[ChatMessage] = []
    skipped = 0
    for item in messages:
        role = item.get("role") if isinstance(item, Mapping) else None
        content = item.get("content") if isinstance(item, Mapping) else None
        if role not in _ALLOWED_ROLES or not isinstance(content, str):
            if strict:
                raise ClientInputError()
            skipped += 1
            continue
        if role == "system":
            continue
        history.append(ChatMessage(role=role, content=content))
    if skipped:
        logger.warning("endpoint.messages_skipped", extra={"extra": {"skipped": skipped}})
    return history


def validate_node(state: EndpointState, settings) -> Dict[str, Any]:
    payload = state.get("payload")
    if not isinstance(payload, Mapping):
        logger.info("endpoint.invalid_payload", extra={"extra": {"reason": "payload"}})
        return _error_state(ClientInputError())
    strict = bool(getattr(settings, "strict_message_validation", False))
    try:
        history = parse_history(payload.get("messages"), strict=strict)
    except ClientInputError as err:
        logger.info("endpoint.invalid_payload", extra={"extra": {"reason": "messages"}})
        return _error_state(err)
    return {"history": history, "dao_context": payload.get("daoContext")}


def credentials_node(state: EndpointState, settings) -> Dict[str, Any]:
    credentials = Credentials.from_settings(settings)
    if not credentials.is_configured:
        logger.error("endpoint.unconfigured")
        return _error_state(ConfigurationError())
    return {"credentials": credentials}


def compose_node(state: EndpointState) -> Dict[str, Any]:
    return {"system_prompt": build_system_prompt(state.get("dao_context"))}


def complete_node(state: EndpointState, gateway: ProviderGateway, settings) -> Dict[str, Any]:
    credentials = state["credentials"]
    request = GatewayRequest(system_prompt=state["system_prompt"], history=state["history"])
    result = gateway.complete(request, credentials)
    if isinstance(result, GatewaySuccess):
        return {"result": result, "status": 200, "body": {"message": result.text, "success": True}}

    body: Dict[str, Any] = {"error": FAILED_TO_PROCESS}
    if settings.should_expose_error_detail:
        body["details"] = scrub_secrets(result.detail, credentials)
    logger.error(
        "endpoint.gateway_failure",
        extra={"extra": {"kind": result.kind.value, "provider": result.provider}},
    )
    return {"result": result, "status": 500, "body": body}


def scrub_secrets(text: str, credentials: Credentials) -> str:
    for secret in credentials.secrets():
        text = text.replace(secret, "***")
    return text


def _stop_or(next_node: str):
    def route(state: EndpointState) -> str:
        return "end" if state.get("status") else next_node

    return route


def build_graph(gateway: ProviderGateway, settings) -> CompiledStateGraph:
    graph = StateGraph(EndpointState)
    graph.add_node("validate_payload", lambda s: validate_node(s, settings))
    graph.add_node("resolve_credentials", lambda s: credentials_node(s, settings))
    graph.add_node("compose_prompt", compose_node)
    graph.add_node("call_gateway", lambda s: complete_node(s, gateway, settings))
    graph.set_entry_point("validate_payload")
    graph.add_conditional_edges(
        "validate_payload",
        _stop_or("resolve_credentials"),
        {"resolve_credentials": "resolve_credentials", "end": END},
    )
    graph.add_conditional_edges(
        "resolve_credentials",
        _stop_or("compose_prompt"),
        {"compose_prompt": "compose_prompt", "end": END},
    )
    graph.add_edge("compose_prompt", "call_gateway")
    graph.add_edge("call_gateway", END)
    return graph.compile()
