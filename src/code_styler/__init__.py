"""
Code Styler - style and documentation checks scoped to changed lines.

Resolves what a change touched from git, parses the per-line diff, runs a
set of pluggable checkers concurrently and reports only the findings that
land on lines of the diff.
"""

__version__ = "0.1.0"

from .changes import FileChange, resolve
from .checkers import DiffChecker, MergeRequest, MergeRequestChecker
from .config import StylerConfig, load_config
from .diff import DiffLine, DiffLineKind, FileDiff, parse
from .findings import (
    FileFinding,
    Finding,
    FindingSource,
    LineFinding,
    MergeRequestFinding,
    Severity,
    filter_relevant,
)
from .orchestrator import run_checkers, run_merge_request_checkers
from .service import CodeStylerService, DiffSource

__all__ = [
    "CodeStylerService",  # Main entry point
    "DiffSource",
    "StylerConfig",
    "load_config",
    "FileChange",
    "resolve",
    "DiffLine",
    "DiffLineKind",
    "FileDiff",
    "parse",
    "DiffChecker",
    "MergeRequest",
    "MergeRequestChecker",
    "run_checkers",
    "run_merge_request_checkers",
    "filter_relevant",
    "Finding",
    "FindingSource",
    "FileFinding",
    "LineFinding",
    "MergeRequestFinding",
    "Severity",
]
