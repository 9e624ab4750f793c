"""External tool execution and output parsing."""

from .parsers import parse_lint_counts, parse_performance_scores, parse_test_counts
from .runner import CommandResult, CommandRunner, run_command

__all__ = [
    "CommandResult",
    "CommandRunner",
    "run_command",
    "parse_lint_counts",
    "parse_performance_scores",
    "parse_test_counts",
]
