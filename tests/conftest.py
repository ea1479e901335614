"""Pytest configuration and shared fixtures."""

import io
from typing import Any

import pytest
from rich.console import Console

from code_review_agent.models.session import ReviewRequest, TerminalEvent, ToolInvocationEvent


class ScriptedCapability:
    """Review capability stub that replays a fixed list of events."""

    def __init__(self, events: list[Any], error: Exception | None = None) -> None:
        self.events = events
        self.error = error
        self.requests: list[ReviewRequest] = []

    async def stream(self, request: ReviewRequest):
        self.requests.append(request)
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error


def make_console() -> Console:
    """Console writing plain text to an in-memory buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


def console_output(console: Console) -> str:
    """Everything written to a console created by make_console."""
    return console.file.getvalue()


SINGLE_CRITICAL_PAYLOAD = {
    "issues": [
        {
            "severity": "critical",
            "category": "security",
            "file": "auth.ts",
            "description": "hardcoded secret",
        }
    ],
    "summary": "1 issue found",
    "overallScore": 60,
}

MIXED_PAYLOAD = {
    "issues": [
        {
            "severity": "low",
            "category": "style",
            "file": "src/utils.py",
            "line": 3,
            "description": "Unused import",
        },
        {
            "severity": "critical",
            "category": "security",
            "file": "src/db.py",
            "line": 42,
            "description": "SQL built with string interpolation",
            "suggestion": "Use parameterized queries",
        },
        {
            "severity": "high",
            "category": "bug",
            "file": "src/api.py",
            "line": 10,
            "description": "None is dereferenced when the user is missing",
        },
        {
            "severity": "low",
            "category": "style",
            "file": "src/api.py",
            "description": "Inconsistent naming",
        },
        {
            "severity": "medium",
            "category": "performance",
            "file": "src/report.py",
            "line": 88,
            "description": "Quadratic loop over rows",
            "suggestion": "Index rows by id first",
        },
    ],
    "summary": "Several issues, one critical",
    "overallScore": 55,
}


@pytest.fixture
def console() -> Console:
    """In-memory console for capturing progress and report output."""
    return make_console()


@pytest.fixture
def single_critical_payload() -> dict:
    """Payload with a single critical security issue."""
    return SINGLE_CRITICAL_PAYLOAD


@pytest.fixture
def mixed_payload() -> dict:
    """Payload with issues of every severity in agent order."""
    return MIXED_PAYLOAD


@pytest.fixture
def successful_events(single_critical_payload) -> list:
    """A short session ending in a successful structured result."""
    return [
        ToolInvocationEvent(name="Glob", input={"pattern": "**/*.ts"}),
        ToolInvocationEvent(name="Read", input={"file_path": "auth.ts"}),
        ToolInvocationEvent(name="Task", input={"subagent_type": "security-scanner"}),
        ToolInvocationEvent(name="Grep", input={"pattern": "password", "path": "src"}),
        TerminalEvent(
            subtype="success",
            structured_output=single_critical_payload,
            total_cost_usd=0.1234,
        ),
    ]


@pytest.fixture
def scripted_capability():
    """Factory for capability stubs replaying scripted events."""
    return ScriptedCapability
