"""Event interpreter: progress output and terminal-result handling."""

import logging
from collections.abc import AsyncIterable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from rich.console import Console

from code_review_agent.agents.definitions import (
    DELEGATION_TOOL,
    GLOB_TOOL,
    GREP_TOOL,
    READ_TOOL,
)
from code_review_agent.console import emit
from code_review_agent.models.review import ReviewResult
from code_review_agent.models.schema import InvalidResultError, parse_review_result
from code_review_agent.models.session import SessionEvent, TerminalEvent, ToolInvocationEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolInvocationSummary:
    """One-line description of a tool call, for progress output only."""

    tool: str
    summary: str

    def __str__(self) -> str:
        return f"{self.tool}: {self.summary}"


def _arg(tool_input: Mapping[str, Any], key: str, default: str) -> str:
    value = tool_input.get(key)
    return default if value is None else str(value)


def _summarize_read(tool_input: Mapping[str, Any]) -> str:
    return _arg(tool_input, "file_path", "file")


def _summarize_glob(tool_input: Mapping[str, Any]) -> str:
    return _arg(tool_input, "pattern", "pattern")


def _summarize_grep(tool_input: Mapping[str, Any]) -> str:
    pattern = _arg(tool_input, "pattern", "")
    path = _arg(tool_input, "path", ".")
    return f'"{pattern}" in {path}'


TOOL_SUMMARIZERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    READ_TOOL: _summarize_read,
    GLOB_TOOL: _summarize_glob,
    GREP_TOOL: _summarize_grep,
}


def summarize_tool_invocation(name: str, tool_input: Any) -> ToolInvocationSummary:
    """Summarize a tool call's arguments; unknown tools get an empty summary."""
    if not isinstance(tool_input, Mapping):
        tool_input = {}
    summarizer = TOOL_SUMMARIZERS.get(name)
    summary = summarizer(tool_input) if summarizer else ""
    return ToolInvocationSummary(tool=name, summary=summary)


def delegation_target(tool_input: Any) -> str:
    """Name of the sub-agent a delegation call targets."""
    if not isinstance(tool_input, Mapping):
        return "unknown"
    return _arg(tool_input, "subagent_type", "unknown")


class EventInterpreter:
    """Consumes session events in order and records the validated result.

    The recorded result is written at most once, on a successful terminal
    event whose payload passes validation.
    """

    def __init__(self, console: Console, strict: bool = False) -> None:
        """Initialize the interpreter.

        Args:
            console: Sink for progress lines
            strict: Validate issue enums and fields, not just the top-level shape
        """
        self.console = console
        self.strict = strict
        self.result: ReviewResult | None = None
        self.failure: str | None = None
        self.cost_usd: float = 0.0
        self.terminal_seen = False

    async def consume(self, events: AsyncIterable[SessionEvent]) -> ReviewResult | None:
        """Drain ``events`` and return the recorded result, if any."""
        async for event in events:
            self.handle(event)
        if not self.terminal_seen:
            logger.warning("Review session ended without a result")
        return self.result

    def handle(self, event: SessionEvent) -> None:
        """Process one event."""
        if isinstance(event, ToolInvocationEvent):
            self._handle_tool_invocation(event)
        elif isinstance(event, TerminalEvent):
            self._handle_terminal(event)
        else:
            logger.debug(f"Ignoring unknown event: {event!r}")

    def _handle_tool_invocation(self, event: ToolInvocationEvent) -> None:
        if event.name == DELEGATION_TOOL:
            emit(self.console, f"🤖 Delegating to: {delegation_target(event.input)}")
            return
        emit(self.console, f"📂 {summarize_tool_invocation(event.name, event.input)}")

    def _handle_terminal(self, event: TerminalEvent) -> None:
        if self.terminal_seen:
            logger.warning(f"Ignoring extra terminal event ({event.subtype})")
            return
        self.terminal_seen = True

        if event.is_success and event.structured_output is not None:
            try:
                result = parse_review_result(event.structured_output, strict=self.strict)
            except InvalidResultError as e:
                logger.debug(f"Structured output rejected: {e}")
                self._fail("Invalid response structure")
            else:
                self.result = result
                self.cost_usd = event.total_cost_usd or 0.0
                emit(self.console)
                emit(self.console, f"✅ Review complete! Cost: ${self.cost_usd:.4f}", style="green")
        else:
            self._fail(event.subtype)

        if event.num_turns is not None and event.duration_ms is not None:
            emit(
                self.console,
                f"   Turns: {event.num_turns} | Time: {event.duration_ms / 1000:.1f}s",
                style="dim",
            )

    def _fail(self, reason: str) -> None:
        self.failure = reason
        emit(self.console)
        emit(self.console, f"❌ Review failed: {reason}", style="red")
