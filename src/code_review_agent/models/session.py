"""Review session request and event models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SubAgentSpec:
    """A sub-agent the review agent may delegate to."""

    description: str
    prompt: str
    tools: tuple[str, ...]
    model: str | None = None


@dataclass(frozen=True)
class ReviewRequest:
    """Everything sent to the review capability for one session."""

    prompt: str
    model: str
    allowed_tools: tuple[str, ...]
    permission_mode: str
    max_turns: int
    output_format: dict[str, Any]
    agents: Mapping[str, SubAgentSpec] = field(default_factory=dict)
    cwd: str | None = None


@dataclass(frozen=True)
class ToolInvocationEvent:
    """The agent invoked a tool."""

    name: str
    input: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TerminalEvent:
    """Final event of a session: completion status and optional payload."""

    subtype: str
    structured_output: Any = None
    total_cost_usd: float | None = None
    num_turns: int | None = None
    duration_ms: int | None = None

    @property
    def is_success(self) -> bool:
        """Whether the session reported a successful completion."""
        return self.subtype == "success"


SessionEvent = ToolInvocationEvent | TerminalEvent
