"""Review task instruction and built-in sub-agents."""

from code_review_agent.models.session import SubAgentSpec

READ_TOOL = "Read"
GLOB_TOOL = "Glob"
GREP_TOOL = "Grep"
# Tool the agent uses to hand work to a named sub-agent
DELEGATION_TOOL = "Task"

SEARCH_TOOLS = (READ_TOOL, GREP_TOOL, GLOB_TOOL)
REVIEW_TOOLS = (READ_TOOL, GLOB_TOOL, GREP_TOOL, DELEGATION_TOOL)

DEFAULT_MODEL = "opus"
DEFAULT_MAX_TURNS = 50
DEFAULT_PERMISSION_MODE = "default"

SECURITY_SCANNER_NAME = "security-scanner"

SECURITY_SCANNER = SubAgentSpec(
    description="Deep security analysis for vulnerabilities",
    prompt="""You are a security expert. Scan for:
- Injection vulnerabilities (SQL, XSS, command injection)
- Authentication and authorization flaws
- Sensitive data exposure
- Insecure dependencies""",
    tools=SEARCH_TOOLS,
    model="sonnet",
)

DEFAULT_SUBAGENTS = {SECURITY_SCANNER_NAME: SECURITY_SCANNER}


def get_review_prompt(directory: str) -> str:
    """Build the task instruction for reviewing ``directory``."""
    return f"""Perform a thorough code review of {directory}.

Analyze all source files for:
1. Bugs and potential runtime errors
2. Security vulnerabilities
3. Performance issues
4. Code quality and maintainability

Be specific with file paths and line numbers where possible."""
