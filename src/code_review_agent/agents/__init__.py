"""Review agent capability and agent definitions."""

from code_review_agent.agents.claude_client import ClaudeAgentCapability, build_agent_options
from code_review_agent.agents.definitions import (
    DEFAULT_SUBAGENTS,
    DELEGATION_TOOL,
    SECURITY_SCANNER,
    get_review_prompt,
)

__all__ = [
    "DEFAULT_SUBAGENTS",
    "DELEGATION_TOOL",
    "SECURITY_SCANNER",
    "ClaudeAgentCapability",
    "build_agent_options",
    "get_review_prompt",
]
