"""Tests for the Claude Agent SDK capability."""

from unittest.mock import MagicMock, patch

import pytest
from claude_agent_sdk import AssistantMessage, ProcessError, ResultMessage, TextBlock, ToolUseBlock
from click.testing import CliRunner

from code_review_agent.agents.claude_client import (
    ClaudeAgentCapability,
    ClaudeClientConfig,
    build_agent_options,
    to_session_events,
)
from code_review_agent.models.session import TerminalEvent, ToolInvocationEvent
from code_review_agent.orchestrator.session import ReviewSessionDriver


def _tool_block(name, tool_input):
    block = MagicMock(spec=ToolUseBlock)
    block.name = name
    block.input = tool_input
    return block


def _assistant(*blocks):
    message = MagicMock(spec=AssistantMessage)
    message.content = list(blocks)
    return message


def _result(subtype="success", structured_output=None, total_cost_usd=None):
    message = MagicMock(spec=ResultMessage)
    message.subtype = subtype
    message.structured_output = structured_output
    message.total_cost_usd = total_cost_usd
    message.num_turns = 3
    message.duration_ms = 1500
    return message


class TestBuildAgentOptions:
    """Tests for request translation."""

    def test_options_mirror_request(self, scripted_capability, tmp_path):
        request = ReviewSessionDriver(scripted_capability([])).build_request(tmp_path)
        options = build_agent_options(request)

        assert options.model == "opus"
        assert options.allowed_tools == ["Read", "Glob", "Grep", "Task"]
        assert options.permission_mode == "default"
        assert options.max_turns == 50
        assert options.output_format == request.output_format
        assert str(options.cwd) == str(tmp_path)

        scanner = options.agents["security-scanner"]
        assert scanner.model == "sonnet"
        assert scanner.tools == ["Read", "Grep", "Glob"]
        assert scanner.description == "Deep security analysis for vulnerabilities"


class TestToSessionEvents:
    """Tests for SDK message conversion."""

    def test_tool_use_blocks_become_events(self):
        text = MagicMock(spec=TextBlock)
        message = _assistant(
            text,
            _tool_block("Read", {"file_path": "a.py"}),
            _tool_block("Task", {"subagent_type": "security-scanner"}),
        )

        assert to_session_events(message) == [
            ToolInvocationEvent(name="Read", input={"file_path": "a.py"}),
            ToolInvocationEvent(name="Task", input={"subagent_type": "security-scanner"}),
        ]

    def test_non_dict_input_becomes_empty(self):
        events = to_session_events(_assistant(_tool_block("Read", None)))
        assert events == [ToolInvocationEvent(name="Read", input={})]

    def test_result_becomes_terminal_event(self):
        payload = {"issues": [], "summary": "ok", "overallScore": 90}
        events = to_session_events(_result(structured_output=payload, total_cost_usd=0.02))

        assert events == [
            TerminalEvent(
                subtype="success",
                structured_output=payload,
                total_cost_usd=0.02,
                num_turns=3,
                duration_ms=1500,
            )
        ]

    def test_other_messages_are_ignored(self):
        assert to_session_events(object()) == []


class TestClaudeAgentCapability:
    """Tests for streaming through the SDK."""

    @pytest.mark.asyncio
    async def test_stream_converts_messages(self, scripted_capability, tmp_path):
        request = ReviewSessionDriver(scripted_capability([])).build_request(tmp_path)
        messages = [
            _assistant(_tool_block("Glob", {"pattern": "**/*.py"})),
            _result(subtype="error_max_turns"),
        ]
        calls = []

        async def fake_query(prompt, options):
            calls.append((prompt, options))
            for message in messages:
                yield message

        with patch("code_review_agent.agents.claude_client.query", fake_query):
            capability = ClaudeAgentCapability(ClaudeClientConfig())
            events = [event async for event in capability.stream(request)]

        assert [type(e) for e in events] == [ToolInvocationEvent, TerminalEvent]
        assert events[1].subtype == "error_max_turns"
        assert calls[0][0] == request.prompt
        assert calls[0][1].max_turns == 50

    @pytest.mark.asyncio
    async def test_sdk_error_surfaces_as_session_error(self, scripted_capability, tmp_path):
        from code_review_agent.orchestrator.session import SessionError

        async def failing_query(prompt, options):
            raise RuntimeError("Claude Code not found")
            yield  # pragma: no cover

        with patch("code_review_agent.agents.claude_client.query", failing_query):
            driver = ReviewSessionDriver(ClaudeAgentCapability())
            with pytest.raises(SessionError, match="Claude Code not found"):
                async for _ in driver.open(tmp_path):
                    pass

    @pytest.mark.asyncio
    async def test_process_error_before_result_is_fatal(self, tmp_path):
        from code_review_agent.orchestrator.session import SessionError

        async def crashing_query(prompt, options):
            yield _assistant(_tool_block("Read", {"file_path": "a.py"}))
            raise ProcessError("Command failed", exit_code=1)

        with patch("code_review_agent.agents.claude_client.query", crashing_query):
            driver = ReviewSessionDriver(ClaudeAgentCapability())
            with pytest.raises(SessionError):
                async for _ in driver.open(tmp_path):
                    pass

    @pytest.mark.asyncio
    async def test_process_error_after_error_result_ends_stream(self, tmp_path):
        async def max_turns_query(prompt, options):
            yield _result(subtype="error_max_turns")
            raise ProcessError("Claude Code returned an error result", exit_code=1)

        with patch("code_review_agent.agents.claude_client.query", max_turns_query):
            driver = ReviewSessionDriver(ClaudeAgentCapability())
            events = [event async for event in driver.open(tmp_path)]

        assert len(events) == 1
        assert events[0].subtype == "error_max_turns"


class TestMaxTurnsExit:
    """CLI exit status when the SDK reports an error result."""

    def test_error_result_exits_zero(self, tmp_path):
        from code_review_agent.cli import cli

        async def max_turns_query(prompt, options):
            yield _assistant(_tool_block("Glob", {"pattern": "**/*.py"}))
            yield _result(subtype="error_max_turns")
            raise ProcessError("Claude Code returned an error result", exit_code=1)

        runner = CliRunner()

        with runner.isolated_filesystem(temp_dir=tmp_path):
            with patch("code_review_agent.agents.claude_client.query", max_turns_query):
                result = runner.invoke(cli, ["review", "."])

        assert result.exit_code == 0
        assert "❌ Review failed: error_max_turns" in result.output
        assert "Review session failed" not in result.output
        assert "REVIEW RESULTS" not in result.output
