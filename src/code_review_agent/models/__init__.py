"""Data models for Code Review Agent."""

from code_review_agent.models.review import Category, ReviewIssue, ReviewResult, Severity
from code_review_agent.models.schema import (
    REVIEW_SCHEMA,
    InvalidResultError,
    is_valid_review_result,
    parse_review_result,
)
from code_review_agent.models.session import (
    ReviewRequest,
    SessionEvent,
    SubAgentSpec,
    TerminalEvent,
    ToolInvocationEvent,
)

__all__ = [
    "REVIEW_SCHEMA",
    "Category",
    "InvalidResultError",
    "ReviewIssue",
    "ReviewRequest",
    "ReviewResult",
    "SessionEvent",
    "Severity",
    "SubAgentSpec",
    "TerminalEvent",
    "ToolInvocationEvent",
    "is_valid_review_result",
    "parse_review_result",
]
