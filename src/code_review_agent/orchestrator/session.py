"""Review session driver: builds the request and opens the event stream."""

import logging
from collections.abc import AsyncIterator, Mapping
from pathlib import Path
from typing import Protocol

from code_review_agent.agents.definitions import DEFAULT_SUBAGENTS, get_review_prompt
from code_review_agent.config import ReviewSettings
from code_review_agent.models.schema import output_format
from code_review_agent.models.session import (
    ReviewRequest,
    SessionEvent,
    SubAgentSpec,
    TerminalEvent,
)

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """Raised when a review session cannot be opened or fails mid-stream."""

    pass


class ReviewCapability(Protocol):
    """Anything that can run a review request and stream its events."""

    def stream(self, request: ReviewRequest) -> AsyncIterator[SessionEvent]:
        """Yield session events for ``request`` in arrival order."""
        ...


class ReviewSessionDriver:
    """Opens exactly one review session per call against a capability."""

    def __init__(
        self,
        capability: ReviewCapability,
        settings: ReviewSettings | None = None,
        agents: Mapping[str, SubAgentSpec] | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            capability: Review capability to send requests to
            settings: Model, turn cap, permission mode and tool list
            agents: Sub-agent registry (defaults to the security scanner)
        """
        self.capability = capability
        self.settings = settings or ReviewSettings()
        self.agents = dict(agents) if agents is not None else dict(DEFAULT_SUBAGENTS)

    def build_request(self, directory: str | Path) -> ReviewRequest:
        """Build the fixed per-session request for ``directory``."""
        return ReviewRequest(
            prompt=get_review_prompt(str(directory)),
            model=self.settings.model,
            allowed_tools=tuple(self.settings.allowed_tools),
            permission_mode=self.settings.permission_mode,
            max_turns=self.settings.max_turns,
            output_format=output_format(),
            agents=self.agents,
            cwd=str(directory),
        )

    async def open(self, directory: str | Path) -> AsyncIterator[SessionEvent]:
        """Open a review session and yield its events lazily.

        The stream ends when the capability emits its terminal event or runs
        out of turns. There is a single attempt; failures are not retried.
        An error raised after the terminal event has been delivered (the SDK
        raises one whenever the CLI exits non-zero on an error result) only
        ends the stream; the terminal event already carries the outcome.

        Raises:
            SessionError: If the session cannot be opened or the stream fails
                before its terminal event
        """
        request = self.build_request(directory)
        logger.info(
            f"Opening review session for {directory} "
            f"(model={request.model}, max_turns={request.max_turns})"
        )
        count = 0
        terminal_seen = False
        try:
            async for event in self.capability.stream(request):
                count += 1
                if isinstance(event, TerminalEvent):
                    terminal_seen = True
                yield event
        except SessionError:
            raise
        except Exception as e:
            if not terminal_seen:
                raise SessionError(f"Review session failed: {e}") from e
            logger.debug(f"Stream error after terminal event ignored: {e}")
        logger.info(f"Review session closed after {count} events")
