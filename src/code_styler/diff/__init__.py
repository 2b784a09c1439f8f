"""Unified diff parsing into a per-line model."""

from .models import DiffLine, DiffLineKind, DiffModel, FileDiff
from .parser import parse, parse_file_header, parse_hunk_header

__all__ = [
    "DiffLine",
    "DiffLineKind",
    "DiffModel",
    "FileDiff",
    "parse",
    "parse_file_header",
    "parse_hunk_header",
]
