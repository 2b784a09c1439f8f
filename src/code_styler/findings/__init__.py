"""Findings: variants, diff-relevance filtering and transport."""

from .models import (
    FileFinding,
    Finding,
    FindingScope,
    FindingSource,
    LineFinding,
    MergeRequestFinding,
    Severity,
)
from .relevance import filter_relevant

__all__ = [
    "FileFinding",
    "Finding",
    "FindingScope",
    "FindingSource",
    "LineFinding",
    "MergeRequestFinding",
    "Severity",
    "filter_relevant",
]
