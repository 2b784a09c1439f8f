"""Diff-relevance filtering.

Checkers may scan whole files; only line findings on lines that appear in
the diff are kept. File and merge-request findings always pass.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Set

from ..diff.models import FileDiff
from ..logging_config import get_logger
from .models import Finding, LineFinding

logger = get_logger(__name__)


def diff_line_numbers(diffs: Iterable[FileDiff]) -> Dict[str, Set[int]]:
    """Map each new path to every original- or new-side number in its diff."""
    numbers: Dict[str, Set[int]] = defaultdict(set)
    for file_diff in diffs:
        touched = numbers[file_diff.new_path]
        for diff_line in file_diff.lines:
            if diff_line.original_line is not None:
                touched.add(diff_line.original_line)
            if diff_line.new_line is not None:
                touched.add(diff_line.new_line)
    return dict(numbers)


def is_relevant(finding: Finding, numbers: Dict[str, Set[int]]) -> bool:
    if not isinstance(finding, LineFinding):
        return True
    touched = numbers.get(finding.path)
    if touched is None:
        return False
    line = finding.line_number
    return line is not None and line in touched


def filter_relevant(findings: Iterable[Finding], diffs: Iterable[FileDiff]) -> List[Finding]:
    """Keep line findings that target a line of the diff, and every other finding."""
    numbers = diff_line_numbers(diffs)
    kept: List[Finding] = []
    dropped = 0
    for finding in findings:
        if is_relevant(finding, numbers):
            kept.append(finding)
        else:
            dropped += 1
    if dropped:
        logger.debug("Dropped %d finding(s) outside the diff", dropped)
    return kept
