"""Base formatter interface for Code Styler output rendering."""

from abc import ABC, abstractmethod
from typing import Sequence

from ..findings.models import Finding


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, findings: Sequence[Finding]) -> None:
        """Render findings to stdout/stderr as appropriate."""

    @abstractmethod
    def format(self, findings: Sequence[Finding]) -> str:
        """Return formatted string representation of findings."""
