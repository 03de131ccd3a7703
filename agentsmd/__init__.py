"""agentsmd - aggregate a project's text files into agents.md.

Scans a directory tree with layered .gitignore/.agentsignore rules and keeps a
single tagged block of source dumps up to date inside agents.md, for AI coding
assistants to read.
"""

__version__ = "0.1.0"

from agentsmd.core import (
    AgentsMdError,
    IgnoreRule,
    RuleSet,
    RunOptions,
    RunResult,
    aggregate_files,
    replace_or_append_block,
    run,
    scan_directory,
)

__all__ = [
    "__version__",
    "AgentsMdError",
    "IgnoreRule",
    "RuleSet",
    "RunOptions",
    "RunResult",
    "aggregate_files",
    "replace_or_append_block",
    "run",
    "scan_directory",
]
