"""Target directory resolution."""

from pathlib import Path


class DirectoryError(Exception):
    """Raised when the review target is missing or not a directory."""

    pass


def resolve_directory(directory: str | Path) -> Path:
    """Resolve a user-supplied path to an existing absolute directory.

    Args:
        directory: Path as given on the command line

    Returns:
        Absolute, normalized path

    Raises:
        DirectoryError: If the path does not exist or is not a directory
    """
    resolved = Path(directory).expanduser().resolve()
    if not resolved.exists():
        raise DirectoryError(f"Directory does not exist: {resolved}")
    if not resolved.is_dir():
        raise DirectoryError(f"Path is not a directory: {resolved}")
    return resolved
