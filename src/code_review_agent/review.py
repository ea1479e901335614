"""Main review flow: one agent session over a directory, drained to a result.

The agent works through the directory with read and search tools, may hand
security analysis to the ``security-scanner`` sub-agent, and finishes with a
structured payload matching ``REVIEW_SCHEMA``. Progress is printed as events
arrive; the payload is only trusted after it passes validation.
"""

import logging
from pathlib import Path

from rich.console import Console

from code_review_agent.agents.claude_client import ClaudeAgentCapability, ClaudeClientConfig
from code_review_agent.config import Config
from code_review_agent.console import banner
from code_review_agent.models.review import ReviewResult
from code_review_agent.orchestrator.interpreter import EventInterpreter
from code_review_agent.orchestrator.session import ReviewCapability, ReviewSessionDriver

logger = logging.getLogger(__name__)


async def run_code_review(
    directory: Path,
    console: Console,
    config: Config | None = None,
    capability: ReviewCapability | None = None,
) -> ReviewResult | None:
    """Review an already-resolved directory.

    Args:
        directory: Absolute path of the directory to review
        console: Sink for banner and progress lines
        config: Loaded configuration (defaults apply when omitted)
        capability: Review capability (defaults to the Claude Agent SDK)

    Returns:
        The validated ReviewResult, or None when the session produced no
        usable result

    Raises:
        SessionError: If the session cannot be opened or fails mid-stream
    """
    config = config or Config()
    if capability is None:
        capability = ClaudeAgentCapability(ClaudeClientConfig(cli_path=config.claude.cli_path))

    banner(console, "🔍 Code Review Agent", f"📁 Directory: {directory}")

    driver = ReviewSessionDriver(capability, settings=config.review, agents=config.subagents)
    interpreter = EventInterpreter(console, strict=config.review.strict_validation)
    result = await interpreter.consume(driver.open(directory))

    if result is not None:
        logger.info(f"Review produced {result.issue_count} issues (score {result.overall_score})")
    elif interpreter.failure:
        logger.info(f"Review produced no result: {interpreter.failure}")

    return result
