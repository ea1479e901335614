"""Configuration loading and validation for Code Review Agent."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from code_review_agent.agents.definitions import (
    DEFAULT_MAX_TURNS,
    DEFAULT_MODEL,
    DEFAULT_PERMISSION_MODE,
    DEFAULT_SUBAGENTS,
    DELEGATION_TOOL,
    REVIEW_TOOLS,
    SEARCH_TOOLS,
)
from code_review_agent.models.session import SubAgentSpec

DEFAULT_CONFIG_FILE = "review-agent.yaml"

PERMISSION_MODES = ("default", "acceptEdits", "plan", "bypassPermissions")
KNOWN_TOOLS = frozenset(REVIEW_TOOLS)


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""

    pass


@dataclass
class ReviewSettings:
    """Settings for the main review session."""

    model: str = DEFAULT_MODEL
    max_turns: int = DEFAULT_MAX_TURNS
    permission_mode: str = DEFAULT_PERMISSION_MODE
    allowed_tools: list[str] = field(default_factory=lambda: list(REVIEW_TOOLS))
    strict_validation: bool = False


@dataclass
class AgentConfig:
    """Configuration for a single sub-agent."""

    name: str
    description: str
    prompt: str
    tools: list[str] = field(default_factory=lambda: list(SEARCH_TOOLS))
    model: str | None = None

    def to_spec(self) -> SubAgentSpec:
        """Convert to the spec sent with the review request."""
        return SubAgentSpec(
            description=self.description,
            prompt=self.prompt,
            tools=tuple(self.tools),
            model=self.model,
        )


def default_agents() -> list[AgentConfig]:
    """Built-in sub-agents used when none are configured."""
    return [
        AgentConfig(
            name=name,
            description=spec.description,
            prompt=spec.prompt,
            tools=list(spec.tools),
            model=spec.model,
        )
        for name, spec in DEFAULT_SUBAGENTS.items()
    ]


@dataclass
class ClaudeSettings:
    """Claude Agent SDK settings."""

    cli_path: str | None = None


@dataclass
class Config:
    """Complete application configuration."""

    review: ReviewSettings = field(default_factory=ReviewSettings)
    agents: list[AgentConfig] = field(default_factory=default_agents)
    claude: ClaudeSettings = field(default_factory=ClaudeSettings)

    @property
    def subagents(self) -> dict[str, SubAgentSpec]:
        """Sub-agent registry keyed by name."""
        return {agent.name: agent.to_spec() for agent in self.agents}


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment.

    Args:
        config_path: Path to config file (default: review-agent.yaml if present)

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
    """
    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_FILE)

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_path}: {e}") from e
        if not isinstance(raw_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping at the top level")

    # Expand environment variables
    raw_config = _expand_env_vars(raw_config)

    return _parse_config(raw_config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in config."""
    if isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            env_var = obj[2:-1]
            return os.environ.get(env_var, "")
        return obj
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a mapping section, treating a missing or empty one as {}."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _tool_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list of tool names, got {type(value).__name__}")
    return list(value)


def _parse_config(raw: dict[str, Any]) -> Config:
    """Parse raw config dict into Config object."""
    # Review settings
    review_raw = _section(raw, "review")
    review = ReviewSettings(
        model=os.environ.get("REVIEW_AGENT_MODEL") or review_raw.get("model", DEFAULT_MODEL),
        max_turns=_env_int(
            "REVIEW_AGENT_MAX_TURNS", review_raw.get("max_turns", DEFAULT_MAX_TURNS)
        ),
        permission_mode=review_raw.get("permission_mode", DEFAULT_PERMISSION_MODE),
        allowed_tools=_tool_list(
            review_raw.get("allowed_tools", REVIEW_TOOLS), "review.allowed_tools"
        ),
        strict_validation=review_raw.get("strict_validation", False),
    )

    # Sub-agents
    agents_raw = raw.get("agents") or []
    if not isinstance(agents_raw, list):
        raise ConfigError(f"'agents' must be a list, got {type(agents_raw).__name__}")

    agents = []
    for index, agent_raw in enumerate(agents_raw):
        if not isinstance(agent_raw, dict):
            raise ConfigError(
                f"'agents[{index}]' must be a mapping, got {type(agent_raw).__name__}"
            )
        agents.append(
            AgentConfig(
                name=agent_raw.get("name", ""),
                description=agent_raw.get("description", ""),
                prompt=agent_raw.get("prompt", ""),
                tools=_tool_list(agent_raw.get("tools", SEARCH_TOOLS), f"agents[{index}].tools"),
                model=agent_raw.get("model"),
            )
        )

    # Built-in security scanner if none configured
    if not agents:
        agents = default_agents()

    claude_raw = _section(raw, "claude")
    claude = ClaudeSettings(cli_path=claude_raw.get("cli_path") or None)

    return Config(review=review, agents=agents, claude=claude)


def _unknown_tools(tools: list[str]) -> list[str]:
    return [str(t) for t in tools if not isinstance(t, str) or t not in KNOWN_TOOLS]


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    review = config.review

    if not isinstance(review.max_turns, int) or review.max_turns < 1:
        errors.append(f"review.max_turns must be a positive integer, got {review.max_turns!r}")

    if not review.model:
        errors.append("review.model must not be empty")

    if review.permission_mode not in PERMISSION_MODES:
        errors.append(
            f"Unknown permission mode {review.permission_mode!r} "
            f"(expected one of: {', '.join(PERMISSION_MODES)})"
        )

    if not isinstance(review.strict_validation, bool):
        errors.append(
            f"review.strict_validation must be true or false, got {review.strict_validation!r}"
        )

    unknown = _unknown_tools(review.allowed_tools)
    if unknown:
        errors.append(f"Unknown tools in review.allowed_tools: {', '.join(unknown)}")

    seen: set[str] = set()
    for agent in config.agents:
        if not agent.name:
            errors.append("Sub-agent with empty name")
            continue
        if agent.name in seen:
            errors.append(f"Duplicate sub-agent name: {agent.name}")
        seen.add(agent.name)
        if not agent.prompt:
            errors.append(f"Sub-agent {agent.name} has no prompt")
        unknown = _unknown_tools(agent.tools)
        if unknown:
            errors.append(f"Unknown tools for sub-agent {agent.name}: {', '.join(unknown)}")
        if DELEGATION_TOOL in agent.tools:
            errors.append(f"Sub-agent {agent.name} must not be allowed to delegate ({DELEGATION_TOOL})")

    if config.agents and DELEGATION_TOOL not in review.allowed_tools:
        errors.append(
            f"Sub-agents are configured but {DELEGATION_TOOL} is not in review.allowed_tools"
        )

    return errors
