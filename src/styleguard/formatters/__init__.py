"""Output formatters for styleguard."""

from .base import BaseFormatter
from .check_formatter import CheckFormatter
from .github_formatter import GithubFormatter
from .json_formatter import JsonFormatter
from .markdown_formatter import MarkdownFormatter
from .rich_formatter import RichFormatter

FORMATS = ("markdown", "json", "check", "rich", "github")


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "markdown", "json", "check", "rich", "github"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "markdown": MarkdownFormatter,
        "json": JsonFormatter,
        "check": CheckFormatter,
        "rich": RichFormatter,
        "github": GithubFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "CheckFormatter",
    "GithubFormatter",
    "JsonFormatter",
    "MarkdownFormatter",
    "RichFormatter",
    "FORMATS",
    "get_formatter",
]
