"""Output formatters for Code Styler."""

from .base import BaseFormatter
from .github_formatter import GithubFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter

FORMATTERS = {
    "rich": RichFormatter,
    "json": JsonFormatter,
    "github": GithubFormatter,
}

__all__ = [
    "BaseFormatter",
    "GithubFormatter",
    "JsonFormatter",
    "RichFormatter",
    "FORMATTERS",
]
