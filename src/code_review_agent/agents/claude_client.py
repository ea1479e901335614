"""Review capability backed by the Claude Agent SDK."""

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from claude_agent_sdk import (
    AgentDefinition,
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    ToolUseBlock,
    query,
)

from code_review_agent.models.session import (
    ReviewRequest,
    SessionEvent,
    TerminalEvent,
    ToolInvocationEvent,
)

logger = logging.getLogger(__name__)


@dataclass
class ClaudeClientConfig:
    """Configuration for the Claude Agent SDK capability."""

    cli_path: str | None = None


def build_agent_options(request: ReviewRequest, cli_path: str | None = None) -> ClaudeAgentOptions:
    """Translate a review request into SDK options.

    Args:
        request: The review request for this session
        cli_path: Optional path to the Claude Code CLI binary

    Returns:
        ClaudeAgentOptions ready to pass to ``query``
    """
    agents = {
        name: AgentDefinition(
            description=spec.description,
            prompt=spec.prompt,
            tools=list(spec.tools),
            model=spec.model,
        )
        for name, spec in request.agents.items()
    }
    options: dict[str, Any] = {
        "model": request.model,
        "allowed_tools": list(request.allowed_tools),
        "permission_mode": request.permission_mode,
        "max_turns": request.max_turns,
        "output_format": request.output_format,
        "agents": agents,
    }
    if request.cwd:
        options["cwd"] = request.cwd
    if cli_path:
        options["cli_path"] = cli_path
    return ClaudeAgentOptions(**options)


def to_session_events(message: Any) -> list[SessionEvent]:
    """Convert one SDK message into zero or more session events.

    Assistant messages yield one event per tool-use block; result messages
    yield the terminal event. Everything else (text, system and user
    messages) carries no orchestration signal.
    """
    if isinstance(message, AssistantMessage):
        events: list[SessionEvent] = []
        for block in message.content:
            if isinstance(block, ToolUseBlock):
                tool_input = block.input if isinstance(block.input, dict) else {}
                events.append(ToolInvocationEvent(name=block.name, input=tool_input))
        return events

    if isinstance(message, ResultMessage):
        return [
            TerminalEvent(
                subtype=str(message.subtype),
                structured_output=getattr(message, "structured_output", None),
                total_cost_usd=message.total_cost_usd,
                num_turns=message.num_turns,
                duration_ms=message.duration_ms,
            )
        ]

    return []


class ClaudeAgentCapability:
    """Runs review sessions through ``claude_agent_sdk.query``."""

    def __init__(self, config: ClaudeClientConfig | None = None) -> None:
        """Initialize the capability.

        Args:
            config: Optional SDK configuration
        """
        self.config = config or ClaudeClientConfig()

    async def stream(self, request: ReviewRequest) -> AsyncIterator[SessionEvent]:
        """Open a session and yield its events in arrival order.

        SDK errors (CLI not found, connection or process failures) propagate
        unchanged; the session driver turns them into ``SessionError``.
        """
        options = build_agent_options(request, cli_path=self.config.cli_path)
        logger.debug(
            f"Starting query: model={request.model} max_turns={request.max_turns} "
            f"agents={', '.join(request.agents) or 'none'}"
        )
        async for message in query(prompt=request.prompt, options=options):
            for event in to_session_events(message):
                yield event
