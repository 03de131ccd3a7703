"""Error taxonomy for agentsmd."""

from __future__ import annotations

from pathlib import Path


class AgentsMdError(Exception):
    """Base exception for all agentsmd errors."""

    pass


class ConfigError(AgentsMdError):
    """Raised when run options or a configuration file are invalid."""

    pass


class TargetDirectoryError(AgentsMdError):
    """Raised when the directory to scan cannot be resolved."""

    def __init__(self, target: Path | str, reason: str) -> None:
        """Initialize target directory error.

        Args:
            target: The directory the user asked to scan.
            reason: Short human-readable cause.
        """
        self.target = Path(target)
        self.reason = reason
        super().__init__(f"Cannot use target directory '{target}': {reason}")


class OutputError(AgentsMdError):
    """Raised when the output document cannot be written."""

    def __init__(self, path: Path, original_error: Exception) -> None:
        """Initialize output error.

        Args:
            path: Path of the document that failed to write.
            original_error: The underlying OS error.
        """
        self.path = path
        self.original_error = original_error
        super().__init__(f"Failed to write {path}: {original_error}")
