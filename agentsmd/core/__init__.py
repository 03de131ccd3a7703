"""Core agentsmd modules."""

from agentsmd.core.aggregate import AggregatedDocument, aggregate_files, build_document
from agentsmd.core.binary import is_binary, is_binary_file
from agentsmd.core.config import RunOptions, build_options, load_config, load_config_or_default
from agentsmd.core.errors import (
    AgentsMdError,
    ConfigError,
    OutputError,
    TargetDirectoryError,
)
from agentsmd.core.patterns import IgnoreRule, IncludeFilter, RuleSet, translate_patterns
from agentsmd.core.runner import RunResult, run
from agentsmd.core.scan import ScanState, scan_directory
from agentsmd.core.stubs import generate_declarations
from agentsmd.core.tags import (
    DEFAULT_TAG_NAME,
    make_close_tag,
    make_open_tag,
    replace_or_append_block,
)

__all__ = [
    # Errors
    "AgentsMdError",
    "ConfigError",
    "OutputError",
    "TargetDirectoryError",
    # Binary sniffing
    "is_binary",
    "is_binary_file",
    # Rules
    "IgnoreRule",
    "IncludeFilter",
    "RuleSet",
    "translate_patterns",
    # Scanning
    "ScanState",
    "scan_directory",
    # Aggregation
    "AggregatedDocument",
    "aggregate_files",
    "build_document",
    "generate_declarations",
    # Tagged blocks
    "DEFAULT_TAG_NAME",
    "make_open_tag",
    "make_close_tag",
    "replace_or_append_block",
    # Config and run
    "RunOptions",
    "build_options",
    "load_config",
    "load_config_or_default",
    "RunResult",
    "run",
]
