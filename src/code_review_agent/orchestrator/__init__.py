"""Orchestrator components for Code Review Agent."""

from code_review_agent.orchestrator.interpreter import EventInterpreter, summarize_tool_invocation
from code_review_agent.orchestrator.session import ReviewCapability, ReviewSessionDriver, SessionError

__all__ = [
    "EventInterpreter",
    "ReviewCapability",
    "ReviewSessionDriver",
    "SessionError",
    "summarize_tool_invocation",
]
