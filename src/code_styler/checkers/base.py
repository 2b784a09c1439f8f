"""Checker contracts.

A diff checker sees the whole change set and diff model of one run; a
merge-request checker sees only merge-request metadata. Both are async and
may raise; inputs are shared between concurrently running checkers and must
not be mutated.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..changes.models import ChangeSet
from ..diff.models import FileDiff
from ..findings.models import Finding, FindingSource


@dataclass(frozen=True)
class MergeRequest:
    """Merge-request metadata as delivered by a CI platform."""

    source_branch: str
    target_branch: str
    title: str = ""
    iid: Optional[int] = None
    author: str = ""


class DiffChecker(ABC):
    source: FindingSource

    @abstractmethod
    async def check_diff(self, changes: ChangeSet, diffs: Sequence[FileDiff]) -> List[Finding]:
        ...


class MergeRequestChecker(ABC):
    source: FindingSource

    @abstractmethod
    async def check(self, merge_request: MergeRequest) -> List[Finding]:
        ...
