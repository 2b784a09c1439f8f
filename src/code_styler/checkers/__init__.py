"""Bundled checkers and the checker contracts."""

from .base import DiffChecker, MergeRequest, MergeRequestChecker
from .branch_name import BranchNameChecker
from .documentation import DocumentationChecker
from .formatter import FormatterChecker
from .image import ImageChecker
from .registry import default_diff_checkers, default_merge_request_checkers

__all__ = [
    "DiffChecker",
    "MergeRequest",
    "MergeRequestChecker",
    "BranchNameChecker",
    "DocumentationChecker",
    "FormatterChecker",
    "ImageChecker",
    "default_diff_checkers",
    "default_merge_request_checkers",
]
