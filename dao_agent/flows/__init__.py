"""LangGraph request pipeline for the agent endpoint."""

from dao_agent.flows.graph import build_graph

__all__ = ["build_graph"]
