"""Structured-output contract for review results.

The same schema is sent to the agent as an output-shape constraint and used
to re-check whatever comes back. Asking for a shape does not guarantee it, so
the payload is treated as untrusted until it passes
:func:`is_valid_review_result`.
"""

import logging
from collections.abc import Mapping
from typing import Any

from code_review_agent.models.review import (
    CATEGORY_VALUES,
    SEVERITY_VALUES,
    Category,
    ReviewIssue,
    ReviewResult,
    Severity,
)

logger = logging.getLogger(__name__)


REVIEW_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "issues": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "severity": {"type": "string", "enum": [s.value for s in Severity]},
                    "category": {"type": "string", "enum": [c.value for c in Category]},
                    "file": {"type": "string"},
                    "line": {"type": "number"},
                    "description": {"type": "string"},
                    "suggestion": {"type": "string"},
                },
                "required": ["severity", "category", "file", "description"],
            },
        },
        "summary": {"type": "string"},
        "overallScore": {"type": "number"},
    },
    "required": ["issues", "summary", "overallScore"],
}


class InvalidResultError(Exception):
    """Raised when a structured payload does not match the review contract."""

    pass


def output_format() -> dict[str, Any]:
    """Output-shape constraint to attach to a review request."""
    return {"type": "json_schema", "schema": REVIEW_SCHEMA}


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a JSON number
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_review_result(payload: Any) -> bool:
    """Shallow structural check of a structured payload.

    Accepts only a mapping with a list ``issues`` (empty is fine), a string
    ``summary`` and a numeric ``overallScore``. Individual issues are not
    inspected.
    """
    if not isinstance(payload, Mapping):
        return False
    if not isinstance(payload.get("issues"), list):
        return False
    if not isinstance(payload.get("summary"), str):
        return False
    return _is_number(payload.get("overallScore"))


def _issue_problems(raw: Mapping[str, Any]) -> list[str]:
    problems = []
    if raw.get("severity") not in SEVERITY_VALUES:
        problems.append(f"invalid severity {raw.get('severity')!r}")
    if raw.get("category") not in CATEGORY_VALUES:
        problems.append(f"invalid category {raw.get('category')!r}")
    for key in ("file", "description"):
        if not isinstance(raw.get(key), str):
            problems.append(f"missing {key}")
    line = raw.get("line")
    if line is not None:
        if not _is_number(line) or line < 1:
            problems.append(f"invalid line {line!r}")
        elif isinstance(line, float) and not line.is_integer():
            problems.append(f"invalid line {line!r}")
    return problems


def parse_review_result(payload: Any, strict: bool = False) -> ReviewResult:
    """Parse a structured payload into a :class:`ReviewResult`.

    Args:
        payload: Untyped structured output from the review session
        strict: Also require every issue to carry valid enum values, file,
            description and a positive integer line when present

    Returns:
        Immutable ReviewResult with issues in emission order

    Raises:
        InvalidResultError: If the payload does not match the contract
    """
    if not is_valid_review_result(payload):
        raise InvalidResultError("Invalid response structure")

    issues = []
    for index, raw in enumerate(payload["issues"]):
        if not isinstance(raw, Mapping):
            if strict:
                raise InvalidResultError(f"Issue {index} is not an object")
            logger.warning(f"Skipping malformed issue at index {index}: {raw!r}")
            continue
        if strict:
            problems = _issue_problems(raw)
            if problems:
                raise InvalidResultError(f"Issue {index}: {', '.join(problems)}")
        issues.append(ReviewIssue.from_dict(raw))

    return ReviewResult(
        summary=payload["summary"],
        overall_score=payload["overallScore"],
        issues=tuple(issues),
    )
